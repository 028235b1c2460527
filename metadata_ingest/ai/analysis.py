"""AI-powered content analysis: one forced tool call per prompt."""

from pathlib import Path

from metadata_ingest.ai.client_base import BaseAnalysisClient
from metadata_ingest.ai.models import AiResponse, Attachment, describe_response
from metadata_ingest.ai.prompt_loader import load_tool_schema
from metadata_ingest.logging.logger import Log


class AiAnalysis:
    """Sends prompts to the configured provider and returns the classified answer."""

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        temperature: float = 0.2,
        tool_schema_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._tool_schema = load_tool_schema(tool_schema_path)

    @property
    def model(self) -> str:
        return self._model

    @property
    def temperature(self) -> float:
        return self._temperature

    def analyze(self, prompt: str, *, attachments: list[Attachment] | None = None) -> AiResponse:
        """Run one analysis call.

        Raises:
            ApiError: when the provider call fails; see BaseAnalysisClient.
        """
        attachments = attachments or []
        Log.debug(f"Analysis prompt:\n{prompt}")
        if attachments:
            Log.info(
                "Analysis attachments: "
                + ", ".join(attachment.describe() for attachment in attachments)
            )

        response = self._client.create_tool_completion(
            model=self._model,
            temperature=self._temperature,
            prompt=prompt,
            tool_schema=self._tool_schema,
            attachments=attachments,
        )

        Log.info(f"AI response source: {describe_response(response)}")
        Log.debug(f"AI raw response:\n{response!r}")
        return response
