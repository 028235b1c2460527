"""Request-envelope validation.

Every problem is collected before failing, so one ``invalid_input`` error
names all missing or invalid fields at once.
"""

from typing import Any

from metadata_ingest.exceptions import invalid_input
from metadata_ingest.processor.models import (
    EmbeddingRequest,
    FileAnalysisRequest,
    UrlAnalysisRequest,
)

MAX_URL_LENGTH = 2048
MAX_FILE_NAME_LENGTH = 255

INVALID_INPUT_MESSAGE = "Invalid input parameters."


def validate_url_request(body: Any) -> UrlAnalysisRequest:
    data = _require_object(body)
    errors: list[str] = []
    url = _required_string(data, "url", errors, max_length=MAX_URL_LENGTH)
    _raise_if_errors(errors)
    return UrlAnalysisRequest(url=url.strip())


def validate_file_request(body: Any) -> FileAnalysisRequest:
    data = _require_object(body)
    errors: list[str] = []
    file_url = _required_string(data, "fileUrl", errors, max_length=MAX_URL_LENGTH)
    file_type = _required_string(data, "fileType", errors)
    file_name = _required_string(data, "fileName", errors, max_length=MAX_FILE_NAME_LENGTH)
    _raise_if_errors(errors)
    return FileAnalysisRequest(
        file_url=file_url.strip(),
        file_type=file_type.strip(),
        file_name=file_name.strip(),
    )


def validate_embedding_request(body: Any) -> EmbeddingRequest:
    data = _require_object(body)
    errors: list[str] = []
    title = _optional_string(data, "title", errors)
    summary = _optional_string(data, "summary", errors)
    extracted_text = _optional_string(data, "extractedText", errors)

    tags: list[str] = []
    raw_tags = data.get("tags")
    if raw_tags is not None:
        if isinstance(raw_tags, list) and all(isinstance(tag, str) for tag in raw_tags):
            tags = list(raw_tags)
        else:
            errors.append("tags must be an array of strings.")

    _raise_if_errors(errors)
    return EmbeddingRequest(
        title=title,
        summary=summary,
        tags=tags,
        extracted_text=extracted_text,
    )


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise invalid_input(
            "Request body must be an object.",
            {"errors": ["Request body must be a JSON object."]},
        )
    return body


def _required_string(
    data: dict[str, Any],
    name: str,
    errors: list[str],
    *,
    max_length: int | None = None,
) -> str:
    value = data.get(name)
    if not isinstance(value, str) or not value.strip():
        errors.append(f"{name} is required and must be a non-empty string.")
        return ""
    if max_length is not None and len(value) > max_length:
        errors.append(f"{name} must be at most {max_length} characters.")
        return ""
    return value


def _optional_string(data: dict[str, Any], name: str, errors: list[str]) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        errors.append(f"{name} must be a string.")
        return ""
    return value


def _raise_if_errors(errors: list[str]) -> None:
    if errors:
        raise invalid_input(INVALID_INPUT_MESSAGE, {"errors": errors})
