import json
from collections.abc import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from metadata_ingest.ai.models import ToolCall
from metadata_ingest.ai.prompt_builder import PromptBuilder
from metadata_ingest.config.settings import Settings
from metadata_ingest.exceptions import ApiError, ErrorCode, provider_error
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.normalization.normalizer import MetadataNormalizer
from metadata_ingest.processor.models import UrlAnalysisRequest
from metadata_ingest.web.firecrawl import FirecrawlClient
from metadata_ingest.web.oembed import OEmbedClient
from metadata_ingest.web.platforms import PLATFORMS
from metadata_ingest.web.url_analyzer import (
    CONFIDENCE_DEGRADED,
    CONFIDENCE_FULL_METADATA,
    CONFIDENCE_OEMBED,
    CONFIDENCE_SCRAPED,
    UrlAnalyzer,
)

Handler = Callable[[httpx.Request], httpx.Response]

ARTICLE_HTML = """
<html><head>
<meta property="og:title" content="Ten Tips for Clean Code">
<meta property="og:description" content="Practical advice for maintainable software.">
<meta property="og:type" content="article">
<meta property="og:site_name" content="Dev Blog">
<meta property="og:image" content="/images/tips.png">
</head><body><article><p>Write small functions that do one thing well.</p></article></body></html>
"""

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def _ai() -> MagicMock:
    ai = MagicMock()
    ai.analyze.return_value = ToolCall(
        arguments=json.dumps(
            {
                "title": "AI Title",
                "description": "AI description",
                "tags": ["Coding", "Tips"],
                "category": "technical",
            }
        )
    )
    return ai


def _analyzer(
    ai: MagicMock, settings: Settings, firecrawl: FirecrawlClient | None = None
) -> UrlAnalyzer:
    return UrlAnalyzer(
        ai=ai,
        prompts=PromptBuilder(),
        normalizer=MetadataNormalizer(),
        settings=settings,
        oembed_client=OEmbedClient(),
        firecrawl_client=firecrawl,
    )


def _fetcher(handler: Handler) -> SafeFetcher:
    return SafeFetcher(transport=httpx.MockTransport(handler))


class TestUrlAnalyzer:
    def test_youtube_uses_oembed_without_page_fetch(self, settings: Settings) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            if request.url.path == "/oembed":
                return httpx.Response(
                    200,
                    json={
                        "title": "Never Gonna Give You Up",
                        "author_name": "Rick Astley",
                        "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
                        "provider_name": "YouTube",
                        "type": "video",
                    },
                )
            raise AssertionError(f"unexpected request {request.url}")

        ai = _ai()
        with _fetcher(handler) as fetcher:
            result = _analyzer(ai, settings).analyze(UrlAnalysisRequest(url=YOUTUBE_URL), fetcher)

        assert len(requested) == 1
        assert result.platform == "youtube"
        assert result.content_type == "video"
        assert result.author == "Rick Astley"
        assert result.site_name == "YouTube"
        assert result.preview_image_url == (
            "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        )
        assert result.confidence == CONFIDENCE_OEMBED
        assert "**Title**: Never Gonna Give You Up" in ai.analyze.call_args.args[0]

    def test_article_page(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=ARTICLE_HTML)

        with _fetcher(handler) as fetcher:
            result = _analyzer(_ai(), settings).analyze(
                UrlAnalysisRequest(url="https://blog.example.com/posts/tips"), fetcher
            )

        assert result.title == "AI Title"
        assert result.tags == ["coding", "tips"]
        assert result.platform is None
        assert result.content_type == "article"
        assert result.site_name == "Dev Blog"
        assert result.preview_image_url == "https://blog.example.com/images/tips.png"
        assert result.confidence == CONFIDENCE_FULL_METADATA
        assert "Write small functions" in result.extracted_text

    def test_unreachable_page_is_degraded(self, settings: Settings) -> None:
        attempts: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(str(request.url))
            return httpx.Response(503)

        ai = _ai()
        url = "https://down.example.com/page"
        with _fetcher(handler) as fetcher:
            result = _analyzer(ai, settings).analyze(UrlAnalysisRequest(url=url), fetcher)

        assert len(attempts) == 2
        ai.analyze.assert_not_called()
        assert result.title == url
        assert result.tags == ["link"]
        assert result.confidence == CONFIDENCE_DEGRADED

    def test_scraping_fallback(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.firecrawl.test":
                assert request.headers["authorization"] == "Bearer fc-key"
                return httpx.Response(
                    200,
                    json={
                        "success": True,
                        "data": {
                            "markdown": "# Scraped\nBody text",
                            "metadata": {"title": "Scraped Title", "sourceURL": "https://js.example.com/"},
                        },
                    },
                )
            return httpx.Response(403)

        firecrawl = FirecrawlClient(api_key="fc-key", base_url="https://api.firecrawl.test/v1")
        with _fetcher(handler) as fetcher:
            result = _analyzer(_ai(), settings, firecrawl).analyze(
                UrlAnalysisRequest(url="https://js.example.com/"), fetcher
            )

        assert result.confidence == CONFIDENCE_SCRAPED
        assert result.extracted_text == "# Scraped\nBody text"

    def test_ai_failure_uses_page_metadata(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=ARTICLE_HTML)

        ai = MagicMock()
        ai.analyze.side_effect = provider_error(500)
        with _fetcher(handler) as fetcher:
            result = _analyzer(ai, settings).analyze(
                UrlAnalysisRequest(url="https://blog.example.com/posts/tips"), fetcher
            )

        assert result.title == "Ten Tips for Clean Code"
        assert result.description == "Practical advice for maintainable software."
        assert result.tags == ["link"]

    def test_blocked_url(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("should not fetch")

        with _fetcher(handler) as fetcher:
            with pytest.raises(ApiError) as exc_info:
                _analyzer(_ai(), settings).analyze(
                    UrlAnalysisRequest(url="http://192.168.0.10/router"), fetcher
                )
        assert exc_info.value.code == ErrorCode.URL_BLOCKED


class TestOEmbedClient:
    def test_platform_without_endpoint_skips_lookup(self) -> None:
        github = next(p for p in PLATFORMS if p.name == "github")
        fetcher = MagicMock()
        assert OEmbedClient().fetch(github, "https://github.com/a/b", fetcher) is None
        fetcher.get_json.assert_not_called()

    def test_response_without_title_or_thumbnail_is_ignored(self) -> None:
        vimeo = next(p for p in PLATFORMS if p.name == "vimeo")
        fetcher = MagicMock()
        fetcher.get_json.return_value = {"provider_name": "Vimeo"}
        assert OEmbedClient().fetch(vimeo, "https://vimeo.com/1", fetcher) is None

    def test_passes_url_and_format(self) -> None:
        vimeo = next(p for p in PLATFORMS if p.name == "vimeo")
        fetcher = MagicMock()
        fetcher.get_json.return_value = {"title": "Clip", "type": "video"}
        data = OEmbedClient(timeout_seconds=2.0).fetch(vimeo, "https://vimeo.com/1", fetcher)
        assert data is not None
        assert data.title == "Clip"
        fetcher.get_json.assert_called_once_with(
            "https://vimeo.com/api/oembed.json",
            params={"url": "https://vimeo.com/1", "format": "json"},
            timeout=2.0,
        )
