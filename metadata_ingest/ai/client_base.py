from abc import ABC, abstractmethod

from metadata_ingest.ai.models import AiResponse, Attachment


class BaseAnalysisClient(ABC):
    """Contract for provider-specific AI analysis clients."""

    @abstractmethod
    def create_tool_completion(
        self,
        *,
        model: str,
        temperature: float,
        prompt: str,
        tool_schema: dict[str, object],
        attachments: list[Attachment],
    ) -> AiResponse:
        """Request a forced call of ``tool_schema`` and return the classified answer.

        Raises:
            ApiError: ``rate_limited``, ``credits_exhausted``, ``ai_error`` or
                ``internal_error`` once the provider call has definitively failed.
        """
