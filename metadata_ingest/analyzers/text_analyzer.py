from typing import Any

from metadata_ingest.analyzers.base import BaseFileAnalyzer
from metadata_ingest.extractors.sampling import sample_text
from metadata_ingest.extractors.titles import strip_extension
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.processor.models import FileAnalysisRequest


class TextAnalyzer(BaseFileAnalyzer):
    """Plain text and Markdown."""

    def _analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        text = fetcher.fetch_text(request.file_url)[: self._settings.max_text_chars]
        Log.info(f"Text file: {len(text)} chars")

        prompt = self._prompts.file_analysis(
            request.file_name,
            text_sample=sample_text(text, self._settings.text_sample_chars),
        )
        fallback = {
            "title": strip_extension(request.file_name),
            "description": "Text file",
            "tags": ["text"],
            "category": "other",
        }
        outcome = self._complete(prompt, fallback)
        return AnalysisResult.from_metadata({**outcome.metadata, "extractedText": text})

    def _failure_metadata(self, request: FileAnalysisRequest) -> dict[str, Any]:
        return {
            "title": strip_extension(request.file_name),
            "description": "Text file",
            "tags": ["text"],
            "category": "other",
        }
