from metadata_ingest.fetch.exceptions import FetchError
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.web.models import OEmbedData, Platform


class OEmbedClient:
    """Looks up embed metadata from a platform's oEmbed endpoint."""

    def __init__(self, timeout_seconds: float = 5.0) -> None:
        self._timeout = timeout_seconds

    def fetch(self, platform: Platform, url: str, fetcher: SafeFetcher) -> OEmbedData | None:
        """Return oEmbed data, or None when the platform has no endpoint or the call fails."""
        if platform.oembed_endpoint is None:
            return None
        try:
            data = fetcher.get_json(
                platform.oembed_endpoint,
                params={"url": url, "format": "json"},
                timeout=self._timeout,
            )
        except FetchError as exc:
            Log.warning(f"oEmbed lookup failed for {platform.name}: {exc}")
            return None

        result = OEmbedData(
            title=_text(data.get("title")),
            author_name=_text(data.get("author_name")),
            thumbnail_url=_text(data.get("thumbnail_url")),
            provider_name=_text(data.get("provider_name")),
            type=_text(data.get("type")),
        )
        if not result.title and not result.thumbnail_url:
            Log.warning(f"oEmbed response for {platform.name} has no title or thumbnail")
            return None
        Log.info(f"oEmbed succeeded for {platform.name}")
        return result


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""
