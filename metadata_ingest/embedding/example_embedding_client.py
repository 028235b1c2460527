"""Offline embedding client for local development."""

import hashlib

from metadata_ingest.embedding.client_base import BaseEmbeddingClient


class ExampleEmbeddingClient(BaseEmbeddingClient):
    """Deterministic pseudo-embedding derived from a hash of the text. No network calls."""

    def __init__(self, dimension: int = 1536) -> None:
        self._dimension = dimension

    def embed(self, *, model: str, text: str) -> list[float] | None:
        _ = model
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(digest[i % len(digest)] - 128) / 128 for i in range(self._dimension)]
