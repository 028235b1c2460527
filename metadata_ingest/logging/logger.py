import logging
import sys
from contextvars import ContextVar, Token

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


class Log:
    """Centralized logging; every line carries the id of the request that produced it."""

    _logger: logging.Logger = logging.getLogger("metadata_ingest")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.addFilter(_RequestIdFilter())
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] [%(request_id)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def bind_request(cls, request_id: str) -> Token[str]:
        """Tag subsequent log lines in this context; pass the token to ``release_request``."""
        return _request_id.set(request_id)

    @classmethod
    def release_request(cls, token: Token[str]) -> None:
        _request_id.reset(token)

    @classmethod
    def current_request(cls) -> str:
        return _request_id.get()

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Full prompts and raw AI payloads go here."""
        cls._logger.debug(message, extra=kwargs)
