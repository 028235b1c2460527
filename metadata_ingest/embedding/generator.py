from metadata_ingest.embedding.client_base import BaseEmbeddingClient
from metadata_ingest.embedding.composer import compose_embedding_text
from metadata_ingest.embedding.models import EmbeddingOutcome
from metadata_ingest.exceptions import internal_error
from metadata_ingest.logging.logger import Log
from metadata_ingest.processor.models import EmbeddingRequest

NO_CONTENT_MESSAGE = "No content available to generate embedding"


class EmbeddingGenerator:
    """Composes the embedding input and rejects vectors of the wrong size."""

    def __init__(self, *, client: BaseEmbeddingClient, model: str, dimension: int = 1536) -> None:
        self._client = client
        self._model = model
        self._dimension = dimension

    def generate(self, request: EmbeddingRequest) -> EmbeddingOutcome:
        """
        Raises:
            ApiError: on provider failure, or ``internal_error`` when the vector
                is missing or has the wrong dimension.
        """
        text = compose_embedding_text(
            title=request.title,
            summary=request.summary,
            tags=request.tags,
            extracted_text=request.extracted_text,
        )
        if not text:
            Log.info("Nothing to embed, skipping embedding call")
            return EmbeddingOutcome(embedding=None, message=NO_CONTENT_MESSAGE)

        Log.info(f"Generating embedding for {len(text)} chars with {self._model}")
        vector = self._client.embed(model=self._model, text=text)
        if vector is None:
            raise internal_error(
                "Invalid embedding response.",
                {"received": 0, "expected": self._dimension},
            )
        if len(vector) != self._dimension:
            Log.error(
                f"Embedding dimension mismatch: expected {self._dimension}, got {len(vector)}"
            )
            raise internal_error(
                "Invalid embedding dimension.",
                {"received": len(vector), "expected": self._dimension},
            )
        return EmbeddingOutcome(embedding=vector)
