from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from metadata_ingest.api.server import create_app
from metadata_ingest.config.settings import Settings
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.processor.processor import build_processor

Handler = Callable[[httpx.Request], httpx.Response]


class RemoteFiles:
    """Serves canned responses to the fetcher by URL; anything else is a 404."""

    def __init__(self) -> None:
        self.responses: dict[str, httpx.Response] = {}
        self.requested: list[str] = []

    def add(self, url: str, response: httpx.Response) -> None:
        self.responses[url] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        return self.responses.get(url, httpx.Response(404))


@pytest.fixture
def remote_files() -> RemoteFiles:
    return RemoteFiles()


@pytest.fixture
def make_client(
    settings: Settings, remote_files: RemoteFiles
) -> Generator[Callable[..., TestClient], None, None]:
    def fetcher_with_transport(**kwargs: Any) -> SafeFetcher:
        return SafeFetcher(transport=httpx.MockTransport(remote_files), **kwargs)

    def factory(**overrides: Any) -> TestClient:
        for name, value in overrides.items():
            setattr(settings, name, value)
        app = create_app(build_processor(settings), settings)
        return TestClient(app, raise_server_exceptions=False)

    with patch(
        "metadata_ingest.processor.processor.SafeFetcher",
        side_effect=fetcher_with_transport,
    ):
        yield factory


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()
