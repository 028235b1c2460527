"""Typed errors surfaced at the request boundary."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    INVALID_INPUT = "invalid_input"
    AUTH_MISSING = "auth_missing"
    AUTH_INVALID = "auth_invalid"
    URL_BLOCKED = "url_blocked"
    RATE_LIMITED = "rate_limited"
    CREDITS_EXHAUSTED = "credits_exhausted"
    AI_ERROR = "ai_error"
    INTERNAL_ERROR = "internal_error"


HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.AUTH_MISSING: 401,
    ErrorCode.AUTH_INVALID: 401,
    ErrorCode.URL_BLOCKED: 403,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.CREDITS_EXHAUSTED: 402,
    ErrorCode.AI_ERROR: 502,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Conditions the caller must react to; analyzers never turn these into fallback metadata.
PROPAGATING_CODES = frozenset(
    {ErrorCode.RATE_LIMITED, ErrorCode.CREDITS_EXHAUSTED, ErrorCode.URL_BLOCKED}
)


class ApiError(Exception):
    """Failure with an HTTP-equivalent status, built once where it happens."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self._code = code
        self._message = message
        self._details = dict(details) if details else None
        self._status = status if status is not None else HTTP_STATUS[code]

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> dict[str, Any] | None:
        return dict(self._details) if self._details else None

    @property
    def status(self) -> int:
        return self._status

    @property
    def propagates(self) -> bool:
        """True for errors that must reach the caller instead of a fallback."""
        return self._code in PROPAGATING_CODES

    def to_envelope(self) -> dict[str, object]:
        error: dict[str, object] = {"code": self._code.value, "message": self._message}
        if self._details:
            error["details"] = dict(self._details)
        return {"error": error}

    def __repr__(self) -> str:
        return f"ApiError(status={self._status}, code={self._code.value!r}, message={self._message!r})"


def invalid_input(message: str, details: dict[str, Any] | None = None) -> ApiError:
    return ApiError(ErrorCode.INVALID_INPUT, message, details)


def url_blocked(hostname: str) -> ApiError:
    return ApiError(
        ErrorCode.URL_BLOCKED,
        "Access to the requested URL is not allowed.",
        {"hostname": hostname},
    )


def rate_limited() -> ApiError:
    return ApiError(ErrorCode.RATE_LIMITED, "Rate limit exceeded. Please try again later.")


def credits_exhausted() -> ApiError:
    return ApiError(
        ErrorCode.CREDITS_EXHAUSTED,
        "AI credits exhausted. Please add credits to continue.",
    )


def internal_error(message: str = "An unexpected error occurred.", details: dict[str, Any] | None = None) -> ApiError:
    return ApiError(ErrorCode.INTERNAL_ERROR, message, details)


def provider_error(status: int, reason: str = "") -> ApiError:
    """Map a non-2xx provider status to its typed error."""
    if status == 429:
        return rate_limited()
    if status == 402:
        return credits_exhausted()
    details = {"status": status, "statusText": reason}
    if status >= 500:
        return ApiError(ErrorCode.AI_ERROR, "AI provider error.", details)
    return ApiError(ErrorCode.INTERNAL_ERROR, "AI provider error.", details)
