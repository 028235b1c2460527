from metadata_ingest.config.settings import Settings
from metadata_ingest.embedding.client_base import BaseEmbeddingClient
from metadata_ingest.embedding.example_embedding_client import ExampleEmbeddingClient
from metadata_ingest.embedding.generator import EmbeddingGenerator
from metadata_ingest.embedding.openai_embedding_client import OpenAIEmbeddingClient


class EmbeddingGeneratorFactory:
    """Creates the embedding generator from settings."""

    @classmethod
    def create(cls, settings: Settings) -> EmbeddingGenerator:
        return EmbeddingGenerator(
            client=cls._create_client(settings),
            model=settings.embedding_model_name,
            dimension=settings.embedding_dimension,
        )

    @classmethod
    def _create_client(cls, settings: Settings) -> BaseEmbeddingClient:
        if settings.ai_provider.lower() == "example":
            return ExampleEmbeddingClient(dimension=settings.embedding_dimension)
        api_key = settings.embedding_api_key or settings.ai_openai_api_key
        if not api_key:
            raise ValueError("embedding_api_key (or ai_openai_api_key) is required for embeddings")
        return OpenAIEmbeddingClient(
            api_key=api_key,
            timeout_seconds=settings.embedding_timeout_seconds,
            base_url=settings.embedding_base_url.strip() or None,
        )
