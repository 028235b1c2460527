"""Shapes an AI completion can take once classified.

The normalizer matches these exhaustively instead of probing an untyped payload.
"""

import re
from dataclasses import dataclass
from typing import Any

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ToolCall:
    """Arguments of a forced function/tool call."""

    arguments: str


@dataclass(frozen=True)
class ContentJson:
    """A JSON object found inside free-text message content."""

    raw: str


@dataclass(frozen=True)
class ContentText:
    """Free-text content with no JSON object in it."""

    text: str


@dataclass(frozen=True)
class NoContent:
    """Nothing usable in the completion."""


AiResponse = ToolCall | ContentJson | ContentText | NoContent


@dataclass(frozen=True)
class Attachment:
    """Visual input sent alongside the prompt, as a URL or a data URI."""

    url: str

    @classmethod
    def inline_document(cls, base64_data: str, mime_type: str = "application/pdf") -> "Attachment":
        return cls(url=f"data:{mime_type};base64,{base64_data}")

    def describe(self) -> str:
        if self.url.startswith("data:"):
            return f"{self.url.split(';', 1)[0]} ({len(self.url)} chars)"
        return self.url


def classify_message(message: Any) -> AiResponse:
    """Classify a chat completion message: tool call > JSON in content > text > none."""
    if message is None:
        return NoContent()

    tool_calls = getattr(message, "tool_calls", None) or []
    if tool_calls:
        function = getattr(tool_calls[0], "function", None)
        arguments = getattr(function, "arguments", None)
        if isinstance(arguments, str) and arguments.strip():
            return ToolCall(arguments=arguments)

    content = getattr(message, "content", None)
    if isinstance(content, str) and content.strip():
        match = _JSON_OBJECT_RE.search(content)
        if match:
            return ContentJson(raw=match.group(0))
        return ContentText(text=content)

    return NoContent()


def describe_response(response: AiResponse) -> str:
    if isinstance(response, ToolCall):
        return "tool_calls"
    if isinstance(response, ContentJson):
        return "content_json"
    if isinstance(response, ContentText):
        return "content_text"
    return "none"
