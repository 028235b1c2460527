import pytest

from metadata_ingest.exceptions import ApiError, ErrorCode
from metadata_ingest.processor.processor import route_file_type
from metadata_ingest.processor.validation import (
    INVALID_INPUT_MESSAGE,
    validate_embedding_request,
    validate_file_request,
    validate_url_request,
)


def _errors(exc: ApiError) -> list[str]:
    details = exc.details or {}
    return details["errors"]


class TestValidateUrlRequest:
    def test_valid(self) -> None:
        assert validate_url_request({"url": " https://example.com "}).url == "https://example.com"

    @pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": 42}, {"url": "x" * 2049}])
    def test_invalid(self, body: dict[str, object]) -> None:
        with pytest.raises(ApiError) as exc_info:
            validate_url_request(body)
        assert exc_info.value.code == ErrorCode.INVALID_INPUT
        assert exc_info.value.message == INVALID_INPUT_MESSAGE

    def test_non_object_body(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            validate_url_request(["https://example.com"])
        assert exc_info.value.status == 400


class TestValidateFileRequest:
    def test_reports_every_missing_field(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            validate_file_request({"fileUrl": "https://f.test/a.pdf"})
        errors = _errors(exc_info.value)
        assert len(errors) == 2
        assert any(e.startswith("fileType") for e in errors)
        assert any(e.startswith("fileName") for e in errors)

    def test_file_name_length(self) -> None:
        body = {"fileUrl": "https://f.test/a", "fileType": "text/plain", "fileName": "n" * 256}
        with pytest.raises(ApiError) as exc_info:
            validate_file_request(body)
        assert _errors(exc_info.value) == ["fileName must be at most 255 characters."]


class TestValidateEmbeddingRequest:
    def test_optional_fields(self) -> None:
        request = validate_embedding_request({"title": "T"})
        assert request.title == "T"
        assert request.tags == []

    def test_tags_must_be_strings(self) -> None:
        with pytest.raises(ApiError) as exc_info:
            validate_embedding_request({"tags": ["ok", 3]})
        assert _errors(exc_info.value) == ["tags must be an array of strings."]


class TestRouteFileType:
    @pytest.mark.parametrize(
        ("file_type", "kind"),
        [
            ("image/png", "image"),
            ("IMAGE/JPEG", "image"),
            ("application/pdf", "pdf"),
            ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "docx"),
            ("text/csv; charset=utf-8", "spreadsheet"),
            ("application/vnd.ms-excel", "spreadsheet"),
            ("application/vnd.openxmlformats-officedocument.presentationml.presentation", "presentation"),
            ("text/markdown", "text"),
            ("video/mp4", "video"),
            ("audio/mpeg", "audio"),
            ("application/zip", "generic"),
        ],
    )
    def test_routes(self, file_type: str, kind: str) -> None:
        assert route_file_type(file_type) == kind
