from abc import ABC, abstractmethod


class BaseEmbeddingClient(ABC):
    """Contract for embedding providers."""

    @abstractmethod
    def embed(self, *, model: str, text: str) -> list[float] | None:
        """Return the first embedding vector, or None if the response carries none.

        Raises:
            ApiError: on provider failure; there are no retries.
        """
