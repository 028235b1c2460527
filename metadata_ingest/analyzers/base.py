from abc import ABC, abstractmethod
from typing import Any

from metadata_ingest.ai.analysis import AiAnalysis
from metadata_ingest.ai.models import Attachment
from metadata_ingest.ai.prompt_builder import PromptBuilder
from metadata_ingest.config.settings import Settings
from metadata_ingest.exceptions import ApiError
from metadata_ingest.extractors.exceptions import ExtractionError
from metadata_ingest.fetch.exceptions import FetchError
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.models import AnalysisResult, NormalizationOutcome
from metadata_ingest.normalization.normalizer import MetadataNormalizer, finalize
from metadata_ingest.pdf.exceptions import PdfExtractionError
from metadata_ingest.processor.models import FileAnalysisRequest

# Failures that degrade to filename-derived metadata instead of failing the request.
RECOVERABLE_ERRORS = (ExtractionError, PdfExtractionError, FetchError)


class BaseFileAnalyzer(ABC):
    """Extract, prompt, call the model, normalize; degrade on failure.

    Subclasses implement ``_analyze`` for the happy path and
    ``_failure_metadata`` for the result returned when it fails.
    """

    def __init__(
        self,
        *,
        ai: AiAnalysis,
        prompts: PromptBuilder,
        normalizer: MetadataNormalizer,
        settings: Settings,
    ) -> None:
        self._ai = ai
        self._prompts = prompts
        self._normalizer = normalizer
        self._settings = settings

    def analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        """Analyze one uploaded file.

        Raises:
            ApiError: only for quota and blocked-URL conditions; every other
                failure returns filename-derived metadata.
        """
        try:
            return self._analyze(request, fetcher)
        except ApiError as exc:
            if exc.propagates:
                raise
            Log.error(f"AI analysis failed for {request.file_name}: {exc.code.value} {exc.message}")
        except RECOVERABLE_ERRORS as exc:
            Log.error(f"Processing failed for {request.file_name}: {exc}")
        return AnalysisResult.from_metadata(
            finalize(self._failure_metadata(request), {}), **self._failure_extras(request)
        )

    @abstractmethod
    def _analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        """Happy path; may raise any recoverable error."""

    @abstractmethod
    def _failure_metadata(self, request: FileAnalysisRequest) -> dict[str, Any]:
        """Filename-derived metadata used when the happy path fails."""

    def _failure_extras(self, request: FileAnalysisRequest) -> dict[str, Any]:
        _ = request
        return {}

    def _complete(
        self,
        prompt: str,
        fallback: dict[str, Any],
        attachments: list[Attachment] | None = None,
    ) -> NormalizationOutcome:
        response = self._ai.analyze(prompt, attachments=attachments)
        return self._normalizer.normalize(response, fallback)
