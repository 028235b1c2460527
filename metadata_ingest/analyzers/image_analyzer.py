from typing import Any

from metadata_ingest.ai.models import Attachment
from metadata_ingest.analyzers.base import BaseFileAnalyzer
from metadata_ingest.extractors.titles import strip_extension
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.processor.models import FileAnalysisRequest
from metadata_ingest.security.ssrf_guard import validate_target_url


class ImageAnalyzer(BaseFileAnalyzer):
    """OCR and classification in a single visual call; nothing is extracted locally."""

    def _analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        _ = fetcher
        validate_target_url(request.file_url)
        outcome = self._complete(
            self._prompts.image(request.file_name),
            self._failure_metadata(request),
            attachments=[Attachment(url=request.file_url)],
        )
        return AnalysisResult.from_metadata(
            outcome.metadata, preview_image_url=request.file_url
        )

    def _failure_metadata(self, request: FileAnalysisRequest) -> dict[str, Any]:
        return {
            "title": strip_extension(request.file_name),
            "description": "Image file",
            "tags": ["image"],
            "category": "other",
        }

    def _failure_extras(self, request: FileAnalysisRequest) -> dict[str, Any]:
        return {"preview_image_url": request.file_url}
