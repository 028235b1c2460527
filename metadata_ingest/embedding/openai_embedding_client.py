import openai

from metadata_ingest.embedding.client_base import BaseEmbeddingClient
from metadata_ingest.exceptions import internal_error, provider_error
from metadata_ingest.logging.logger import Log


class OpenAIEmbeddingClient(BaseEmbeddingClient):
    """Embedding client built on the OpenAI embeddings API. Called once, never retried."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def embed(self, *, model: str, text: str) -> list[float] | None:
        try:
            response = self._client.embeddings.create(model=model, input=text)
        except openai.APIStatusError as exc:
            Log.error(f"Embedding API error: {exc.status_code}")
            raise provider_error(exc.status_code, exc.response.reason_phrase) from exc
        except openai.APIError as exc:
            Log.error(f"Embedding request failed: {exc}")
            raise internal_error("Embedding provider error.", {"reason": str(exc)}) from exc

        if not response.data:
            return None
        return list(response.data[0].embedding)
