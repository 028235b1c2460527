from types import TracebackType
from typing import Any
from urllib.parse import urljoin

import httpx

from metadata_ingest.fetch.exceptions import FetchError
from metadata_ingest.logging.logger import Log
from metadata_ingest.security.ssrf_guard import validate_target_url

BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
# Body bytes are re-wrapped after decoding, so these no longer describe them.
_DECODED_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


class SafeFetcher:
    """Request-scoped HTTP client that validates every target before connecting.

    Redirects are followed manually so each hop goes through the SSRF guard.
    Bodies are streamed and never buffered past ``max_download_bytes``
    (``max_html_bytes`` for pages, which are truncated instead of rejected).
    Use as a context manager; closing it releases any open connections.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        max_redirects: int = 5,
        max_download_bytes: int = 25 * 1024 * 1024,
        max_html_bytes: int = 2 * 1024 * 1024,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._max_redirects = max_redirects
        self._max_download_bytes = max_download_bytes
        self._max_html_bytes = max_html_bytes
        self._client = httpx.Client(follow_redirects=False, transport=transport)

    def __enter__(self) -> "SafeFetcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        max_bytes: int | None = None,
        truncate: bool = False,
    ) -> httpx.Response:
        """GET a URL, following redirects, and return the successful response.

        The body is read up to ``max_bytes`` (``max_download_bytes`` by
        default). Past the cap it is cut short when ``truncate`` is set.

        Raises:
            ApiError: if the target (or any redirect hop) is blocked.
            FetchError: on network errors, timeouts, redirect loops, non-2xx
                status or a body over the cap.
        """
        current = url
        limit = max_bytes if max_bytes is not None else self._max_download_bytes
        for _ in range(self._max_redirects + 1):
            validate_target_url(current)
            response = self._send(
                "GET",
                current,
                max_bytes=limit,
                truncate=truncate,
                params=params,
                headers=headers,
                timeout=timeout,
            )
            if response.status_code in _REDIRECT_STATUSES and "location" in response.headers:
                current = urljoin(str(response.url), response.headers["location"])
                params = None
                Log.debug(f"Following redirect to {current}")
                continue
            return self._ensure_success(response, current)
        raise FetchError(f"Too many redirects fetching {url}")

    def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """POST a JSON body and decode a JSON object response."""
        validate_target_url(url)
        response = self._send(
            "POST",
            url,
            max_bytes=self._max_download_bytes,
            json=payload,
            headers=headers,
            timeout=timeout,
        )
        return self._decode_json(self._ensure_success(response, url), url)

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        response = self.get(url, params=params, timeout=timeout)
        return self._decode_json(response, url)

    def fetch_bytes(self, url: str, *, timeout: float | None = None) -> bytes:
        return self.get(url, timeout=timeout).content

    def fetch_text(self, url: str, *, timeout: float | None = None) -> str:
        return self.get(url, timeout=timeout, truncate=True).text

    def fetch_html(self, url: str, *, timeout: float | None = None) -> httpx.Response:
        return self.get(
            url,
            headers=BROWSER_HEADERS,
            timeout=timeout,
            max_bytes=self._max_html_bytes,
            truncate=True,
        )

    def _send(
        self,
        method: str,
        url: str,
        *,
        max_bytes: int,
        truncate: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        timeout = kwargs.pop("timeout", None)
        request = self._client.build_request(
            method,
            url,
            timeout=timeout if timeout is not None else self._timeout,
            **kwargs,
        )
        try:
            response = self._client.send(request, stream=True)
            try:
                if response.status_code in _REDIRECT_STATUSES:
                    body = b""
                else:
                    body = self._read_capped(response, url, max_bytes, truncate)
            finally:
                response.close()
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Network error fetching {url}: {exc}") from exc

        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _DECODED_HEADERS
        ]
        return httpx.Response(
            response.status_code, headers=headers, content=body, request=request
        )

    @staticmethod
    def _read_capped(
        response: httpx.Response, url: str, max_bytes: int, truncate: bool
    ) -> bytes:
        chunks: list[bytes] = []
        received = 0
        for chunk in response.iter_bytes():
            if received + len(chunk) > max_bytes:
                if not truncate:
                    raise FetchError(f"Response from {url} exceeds {max_bytes} bytes")
                chunks.append(chunk[: max_bytes - received])
                Log.warning(f"Truncated response from {url} at {max_bytes} bytes")
                break
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks)

    @staticmethod
    def _ensure_success(response: httpx.Response, url: str) -> httpx.Response:
        if not response.is_success:
            raise FetchError(
                f"Fetching {url} failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _decode_json(response: httpx.Response, url: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError(f"Invalid JSON from {url}") from exc
        if not isinstance(data, dict):
            raise FetchError(f"Expected a JSON object from {url}")
        return data
