from typing import Any

from metadata_ingest.analyzers.base import BaseFileAnalyzer
from metadata_ingest.extractors.docx import DocxExtractor
from metadata_ingest.extractors.sampling import sample_for_ai
from metadata_ingest.extractors.titles import meaningful_title, strip_extension
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.processor.models import FileAnalysisRequest

WORD_TAGS = ["word", "document"]


class DocxAnalyzer(BaseFileAnalyzer):
    def __init__(self, *, docx_extractor: DocxExtractor, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._docx_extractor = docx_extractor

    def _analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        content = self._docx_extractor.extract(fetcher.fetch_bytes(request.file_url))

        title = strip_extension(request.file_name)
        embedded_title = meaningful_title(content.metadata.title)
        if embedded_title:
            Log.info("Using embedded DOCX title")
            title = embedded_title

        sample = sample_for_ai(
            content.text,
            long_text_threshold=self._settings.long_text_threshold,
            max_ai_input_chars=self._settings.max_ai_input_chars,
            short_sample_chars=self._settings.short_sample_chars,
        )
        prompt = self._prompts.file_analysis(
            request.file_name,
            text_sample=sample,
            metadata=content.metadata.as_dict(),
        )
        fallback = {
            "title": title,
            "description": "Word document",
            "tags": WORD_TAGS,
            "category": "other",
        }
        outcome = self._complete(prompt, fallback)
        return AnalysisResult.from_metadata({**outcome.metadata, "extractedText": content.text})

    def _failure_metadata(self, request: FileAnalysisRequest) -> dict[str, Any]:
        return {
            "title": strip_extension(request.file_name),
            "description": "Word document",
            "tags": WORD_TAGS,
            "category": "other",
        }
