"""Offline analysis client.

Implement BaseAnalysisClient and register the provider in AiAnalysisFactory to
add a new provider; this adapter is the smallest working example.
"""

import json
from typing import ClassVar

from metadata_ingest.ai.client_base import BaseAnalysisClient
from metadata_ingest.ai.models import AiResponse, Attachment, ToolCall


class ExampleClientAdapter(BaseAnalysisClient):
    """Returns a fixed tool call without any network traffic.

    Useful for local development and for running the service without a key.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "title": "Example Analysis",
        "description": "Placeholder metadata produced without an AI provider.",
        "tags": ["example"],
        "category": "other",
        "summary": "",
        "keyPoints": [],
    }

    def create_tool_completion(
        self,
        *,
        model: str,
        temperature: float,
        prompt: str,
        tool_schema: dict[str, object],
        attachments: list[Attachment],
    ) -> AiResponse:
        _ = model, temperature, prompt, tool_schema, attachments
        return ToolCall(arguments=json.dumps(self.DEFAULT_RESPONSE))
