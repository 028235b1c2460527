import json
from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from metadata_ingest.ai.models import Attachment, ContentJson, NoContent, ToolCall
from metadata_ingest.ai.openai_client_adapter import OpenAIClientAdapter
from metadata_ingest.exceptions import ApiError, ErrorCode

TOOL_SCHEMA = {"type": "function", "function": {"name": "analyze_file", "parameters": {}}}
_REQUEST = httpx.Request("POST", "https://api.example.com/v1/chat/completions")


def _make_mock_response(content: str | None = None, arguments: str | None = None) -> MagicMock:
    message = MagicMock()
    message.content = content
    if arguments is None:
        message.tool_calls = None
    else:
        tool_call = MagicMock()
        tool_call.function.arguments = arguments
        message.tool_calls = [tool_call]
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _status_error(status: int) -> openai.APIStatusError:
    return openai.APIStatusError(
        "error", response=httpx.Response(status, request=_REQUEST), body=None
    )


def _rate_limit_error() -> openai.RateLimitError:
    return openai.RateLimitError(
        "rate limited", response=httpx.Response(429, request=_REQUEST), body=None
    )


def _complete(adapter: OpenAIClientAdapter, attachments: list[Attachment] | None = None):  # type: ignore[no-untyped-def]
    return adapter.create_tool_completion(
        model="m",
        temperature=0.2,
        prompt="describe this",
        tool_schema=TOOL_SCHEMA,
        attachments=attachments or [],
    )


class TestOpenAIClientAdapter:
    def _adapter(self, mock_client: MagicMock, sleep: MagicMock) -> OpenAIClientAdapter:
        with patch(
            "metadata_ingest.ai.openai_client_adapter.openai.OpenAI",
            return_value=mock_client,
        ):
            return OpenAIClientAdapter(api_key="k", timeout_seconds=30, sleep=sleep)

    def test_returns_tool_call(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(
            arguments='{"title": "T"}'
        )
        adapter = self._adapter(mock_client, MagicMock())
        assert _complete(adapter) == ToolCall(arguments='{"title": "T"}')

    def test_json_in_content_when_no_tool_call(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(
            content='Here you go: {"title": "T"} done'
        )
        adapter = self._adapter(mock_client, MagicMock())
        assert _complete(adapter) == ContentJson(raw='{"title": "T"}')

    def test_empty_choices_is_no_content(self) -> None:
        mock_client = MagicMock()
        response = MagicMock()
        response.choices = []
        mock_client.chat.completions.create.return_value = response
        adapter = self._adapter(mock_client, MagicMock())
        assert _complete(adapter) == NoContent()

    def test_request_forces_tool_and_sends_attachments(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(content="x")
        adapter = self._adapter(mock_client, MagicMock())
        _complete(adapter, [Attachment(url="https://cdn.example.com/cat.png")])

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["tool_choice"] == {"type": "function", "function": {"name": "analyze_file"}}
        assert kwargs["tools"] == [TOOL_SCHEMA]
        content = kwargs["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "describe this"}
        assert content[1] == {
            "type": "image_url",
            "image_url": {"url": "https://cdn.example.com/cat.png"},
        }

    def test_retries_rate_limit_with_fixed_schedule(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = [
            _rate_limit_error(),
            _rate_limit_error(),
            _make_mock_response(arguments=json.dumps({"title": "ok"})),
        ]
        sleep = MagicMock()
        adapter = self._adapter(mock_client, sleep)
        assert isinstance(_complete(adapter), ToolCall)
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_rate_limit_exhausted_raises_rate_limited(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = _rate_limit_error()
        sleep = MagicMock()
        adapter = self._adapter(mock_client, sleep)
        with pytest.raises(ApiError) as exc_info:
            _complete(adapter)
        assert exc_info.value.code == ErrorCode.RATE_LIMITED
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0, 4.0]
        assert mock_client.chat.completions.create.call_count == 4

    @pytest.mark.parametrize(
        ("status", "code"),
        [
            (402, ErrorCode.CREDITS_EXHAUSTED),
            (500, ErrorCode.AI_ERROR),
            (503, ErrorCode.AI_ERROR),
            (400, ErrorCode.INTERNAL_ERROR),
        ],
    )
    def test_maps_status_errors_without_retry(self, status: int, code: ErrorCode) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = _status_error(status)
        sleep = MagicMock()
        adapter = self._adapter(mock_client, sleep)
        with pytest.raises(ApiError) as exc_info:
            _complete(adapter)
        assert exc_info.value.code == code
        sleep.assert_not_called()
        assert mock_client.chat.completions.create.call_count == 1

    def test_retries_network_errors(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = [
            openai.APIConnectionError(request=_REQUEST),
            _make_mock_response(content="plain text"),
        ]
        sleep = MagicMock()
        adapter = self._adapter(mock_client, sleep)
        _complete(adapter)
        sleep.assert_called_once_with(1.0)

    def test_network_errors_exhausted_raise_internal_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=_REQUEST
        )
        adapter = self._adapter(mock_client, MagicMock())
        with pytest.raises(ApiError) as exc_info:
            _complete(adapter)
        assert exc_info.value.code == ErrorCode.INTERNAL_ERROR
        assert mock_client.chat.completions.create.call_count == 4
