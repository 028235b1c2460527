from metadata_ingest.fetch.exceptions import FetchError
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.web.models import PageContent, WebMetadata


class FirecrawlClient:
    """Scraping-service fallback used when a page cannot be fetched directly."""

    def __init__(self, *, api_key: str, base_url: str, timeout_seconds: float = 30.0) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds

    def scrape(self, url: str, fetcher: SafeFetcher, max_chars: int = 3_000) -> PageContent:
        """
        Raises:
            FetchError: if the service call fails or reports no content.
        """
        payload = fetcher.post_json(
            f"{self._base_url}/scrape",
            {"url": url, "formats": ["markdown"], "onlyMainContent": True},
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=self._timeout,
        )
        data = payload.get("data")
        if not payload.get("success") or not isinstance(data, dict):
            raise FetchError(f"Scraping service returned no content for {url}")

        raw_metadata = data.get("metadata")
        info = raw_metadata if isinstance(raw_metadata, dict) else {}
        markdown = data.get("markdown")
        text = markdown.strip() if isinstance(markdown, str) else ""
        Log.info(f"Scraping service returned {len(text)} chars for {url}")
        return PageContent(
            url=_text(info.get("sourceURL")) or url,
            metadata=WebMetadata(
                title=_text(info.get("title")) or _text(info.get("ogTitle")),
                description=_text(info.get("description")) or _text(info.get("ogDescription")),
                image=_text(info.get("ogImage")),
                site_name=_text(info.get("ogSiteName")),
                author=_text(info.get("author")),
            ),
            text=text[:max_chars],
            source="firecrawl",
        )


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""
