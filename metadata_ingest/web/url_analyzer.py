"""URL analysis: platform embeds, page metadata and AI enrichment.

Order of sources: oEmbed for known platforms, then the page itself (one
retry), then the scraping service, then a URL-only result. A URL never
fails the request once it has passed the SSRF guard.
"""

from typing import Any
from urllib.parse import urljoin

from metadata_ingest.ai.analysis import AiAnalysis
from metadata_ingest.ai.prompt_builder import PromptBuilder
from metadata_ingest.config.settings import Settings
from metadata_ingest.exceptions import ApiError
from metadata_ingest.fetch.exceptions import FetchError
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.normalization.normalizer import MetadataNormalizer, finalize
from metadata_ingest.processor.models import UrlAnalysisRequest
from metadata_ingest.security.ssrf_guard import validate_target_url
from metadata_ingest.web.content_extractor import extract_main_text
from metadata_ingest.web.firecrawl import FirecrawlClient
from metadata_ingest.web.html_metadata import parse_html_metadata
from metadata_ingest.web.models import OEmbedData, PageContent, Platform, WebMetadata
from metadata_ingest.web.oembed import OEmbedClient
from metadata_ingest.web.platforms import content_type, detect_platform, upgrade_thumbnail

PRIMARY_FETCH_ATTEMPTS = 2

CONFIDENCE_OEMBED = 0.9
CONFIDENCE_FULL_METADATA = 0.8
CONFIDENCE_PARTIAL_METADATA = 0.6
CONFIDENCE_SCRAPED = 0.4
CONFIDENCE_DEGRADED = 0.1

DEGRADED_DESCRIPTION = "Content could not be retrieved from this URL."


class UrlAnalyzer:
    def __init__(
        self,
        *,
        ai: AiAnalysis,
        prompts: PromptBuilder,
        normalizer: MetadataNormalizer,
        settings: Settings,
        oembed_client: OEmbedClient,
        firecrawl_client: FirecrawlClient | None = None,
    ) -> None:
        self._ai = ai
        self._prompts = prompts
        self._normalizer = normalizer
        self._settings = settings
        self._oembed = oembed_client
        self._firecrawl = firecrawl_client

    def analyze(self, request: UrlAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        """
        Raises:
            ApiError: if the URL is blocked, or on AI quota errors.
        """
        url = request.url
        validate_target_url(url)

        platform = detect_platform(url)
        oembed = self._oembed.fetch(platform, url, fetcher) if platform else None
        if platform:
            Log.info(f"Detected platform: {platform.name}")

        page: PageContent | None = None
        if platform is not None and platform.is_video and oembed is not None:
            Log.info("Video platform with oEmbed data, skipping HTML fetch")
        else:
            page = self._fetch_page(url, fetcher)

        if page is None and oembed is None:
            Log.warning(f"No content could be retrieved for {url}")
            return self._degraded(url, platform)

        metadata = merge_oembed(page.metadata if page else WebMetadata(), oembed)
        page_url = page.url if page else url
        thumbnail = upgrade_thumbnail(platform, url, oembed.thumbnail_url) if oembed else ""
        image = thumbnail or metadata.image
        text = page.text if page else ""

        fallback = {
            "title": metadata.title or url,
            "description": metadata.description,
            "tags": metadata.tags or ([platform.name] if platform else ["link"]),
            "category": "other",
        }
        prompt = self._prompts.web(
            url,
            title=metadata.title,
            description=metadata.description,
            site_name=metadata.site_name,
            author=metadata.author,
            content=text,
        )
        try:
            outcome_metadata = self._complete(prompt, fallback)
        except ApiError as exc:
            if exc.propagates:
                raise
            Log.error(f"AI analysis failed for {url}: {exc.code.value} {exc.message}")
            outcome_metadata = finalize(fallback, fallback)

        return AnalysisResult.from_metadata(
            {**outcome_metadata, "extractedText": text},
            preview_image_url=urljoin(page_url, image) if image else None,
            author=metadata.author or None,
            platform=platform.name if platform else None,
            content_type=content_type(platform, metadata.type),
            site_name=metadata.site_name or None,
            published_time=metadata.published_time or None,
            confidence=confidence(oembed, page),
        )

    def _complete(self, prompt: str, fallback: dict[str, Any]) -> dict[str, Any]:
        response = self._ai.analyze(prompt)
        return self._normalizer.normalize(response, fallback).metadata

    def _fetch_page(self, url: str, fetcher: SafeFetcher) -> PageContent | None:
        for attempt in range(1, PRIMARY_FETCH_ATTEMPTS + 1):
            try:
                response = fetcher.fetch_html(url)
            except FetchError as exc:
                Log.warning(f"Page fetch attempt {attempt}/{PRIMARY_FETCH_ATTEMPTS} failed: {exc}")
                continue
            final_url = str(response.url)
            html = response.text
            return PageContent(
                url=final_url,
                metadata=parse_html_metadata(html, final_url),
                text=extract_main_text(html, self._settings.web_content_chars, url=final_url),
            )

        if self._firecrawl is None:
            return None
        try:
            return self._firecrawl.scrape(url, fetcher, self._settings.web_content_chars)
        except FetchError as exc:
            Log.warning(f"Scraping fallback failed: {exc}")
            return None

    @staticmethod
    def _degraded(url: str, platform: Platform | None) -> AnalysisResult:
        return AnalysisResult(
            title=url,
            description=DEGRADED_DESCRIPTION,
            tags=["link"],
            category="other",
            platform=platform.name if platform else None,
            content_type=content_type(platform),
            confidence=CONFIDENCE_DEGRADED,
        )


def merge_oembed(metadata: WebMetadata, oembed: OEmbedData | None) -> WebMetadata:
    """Overlay oEmbed values, which win when present."""
    if oembed is None:
        return metadata
    return WebMetadata(
        title=oembed.title or metadata.title,
        description=metadata.description,
        image=oembed.thumbnail_url or metadata.image,
        author=oembed.author_name or metadata.author,
        site_name=oembed.provider_name or metadata.site_name,
        type=metadata.type or oembed.type,
        published_time=metadata.published_time,
        modified_time=metadata.modified_time,
        tags=list(metadata.tags),
    )


def confidence(oembed: OEmbedData | None, page: PageContent | None) -> float:
    if oembed is not None:
        return CONFIDENCE_OEMBED
    if page is None:
        return CONFIDENCE_DEGRADED
    if page.source != "html":
        return CONFIDENCE_SCRAPED
    if page.metadata.title and page.metadata.description:
        return CONFIDENCE_FULL_METADATA
    return CONFIDENCE_PARTIAL_METADATA
