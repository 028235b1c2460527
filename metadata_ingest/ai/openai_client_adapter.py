import time
from collections.abc import Callable
from typing import Any

import httpx
import openai

from metadata_ingest.ai.client_base import BaseAnalysisClient
from metadata_ingest.ai.models import AiResponse, Attachment, classify_message
from metadata_ingest.exceptions import internal_error, provider_error, rate_limited
from metadata_ingest.logging.logger import Log

# Fixed schedule, not a multiplier: one entry per retry.
RETRY_DELAYS_SECONDS: tuple[float, ...] = (1.0, 2.0, 4.0)


class OpenAIClientAdapter(BaseAnalysisClient):
    """Analysis client built on the OpenAI-compatible chat completions API.

    Retries on HTTP 429 and on network-level failures, sleeping through
    ``retry_delays`` in order. Any other non-2xx status is mapped immediately.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        retry_delays: tuple[float, ...] = RETRY_DELAYS_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )
        self._retry_delays = retry_delays
        self._sleep = sleep

    def create_tool_completion(
        self,
        *,
        model: str,
        temperature: float,
        prompt: str,
        tool_schema: dict[str, object],
        attachments: list[Attachment],
    ) -> AiResponse:
        request = self._build_request(model, temperature, prompt, tool_schema, attachments)
        attempt = 0
        while True:
            try:
                response = self._client.chat.completions.create(**request)
            except openai.RateLimitError as exc:
                if attempt < len(self._retry_delays):
                    self._wait(attempt, "Rate limit hit (429)")
                    attempt += 1
                    continue
                Log.error("Rate limit exceeded after retries")
                raise rate_limited() from exc
            except openai.APIStatusError as exc:
                Log.error(f"AI gateway error: {exc.status_code}")
                raise provider_error(exc.status_code, _reason(exc)) from exc
            except (openai.APIConnectionError, httpx.TransportError) as exc:
                if attempt < len(self._retry_delays):
                    self._wait(attempt, f"Network error ({exc.__class__.__name__})")
                    attempt += 1
                    continue
                Log.error(f"AI provider unreachable after retries: {exc}")
                raise internal_error(
                    "AI provider network error.", {"reason": str(exc)}
                ) from exc
            except openai.APIError as exc:
                raise internal_error("AI provider error.", {"reason": str(exc)}) from exc

            if not response.choices:
                Log.warning("AI returned no choices")
                return classify_message(None)
            return classify_message(response.choices[0].message)

    def _wait(self, attempt: int, reason: str) -> None:
        delay = self._retry_delays[attempt]
        Log.warning(
            f"{reason}. Retrying in {int(delay * 1000)}ms "
            f"(attempt {attempt + 1}/{len(self._retry_delays)})"
        )
        self._sleep(delay)

    @staticmethod
    def _build_request(
        model: str,
        temperature: float,
        prompt: str,
        tool_schema: dict[str, object],
        attachments: list[Attachment],
    ) -> dict[str, Any]:
        content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        for attachment in attachments:
            content.append({"type": "image_url", "image_url": {"url": attachment.url}})

        function = tool_schema.get("function", {})
        name = function.get("name", "") if isinstance(function, dict) else ""
        return {
            "model": model,
            "temperature": temperature,
            "messages": [{"role": "user", "content": content}],
            "tools": [tool_schema],
            "tool_choice": {"type": "function", "function": {"name": name}},
        }


def _reason(exc: openai.APIStatusError) -> str:
    try:
        return exc.response.reason_phrase
    except AttributeError:
        return ""
