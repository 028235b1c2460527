import base64
from typing import Any

from metadata_ingest.ai.models import Attachment
from metadata_ingest.analyzers.base import BaseFileAnalyzer
from metadata_ingest.exceptions import ApiError
from metadata_ingest.extractors.models import PdfContent
from metadata_ingest.extractors.sampling import sample_for_ai
from metadata_ingest.extractors.titles import meaningful_title, strip_extension
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.models import AnalysisResult, FallbackUsed
from metadata_ingest.normalization.normalizer import finalize
from metadata_ingest.pdf.base import BasePdfExtractor
from metadata_ingest.pdf.exceptions import PdfExtractionError
from metadata_ingest.processor.models import FileAnalysisRequest

PDF_TAGS = ["pdf", "document"]


def page_description(page_count: int) -> str:
    return f"PDF document with {page_count} {'page' if page_count == 1 else 'pages'}"


class PdfAnalyzer(BaseFileAnalyzer):
    """Text-first PDF analysis with an inline-document fallback for scans."""

    def __init__(self, *, pdf_extractor: BasePdfExtractor, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._pdf_extractor = pdf_extractor

    def _analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        pdf_bytes = fetcher.fetch_bytes(request.file_url)
        Log.info(f"PDF size: {len(pdf_bytes) / 1024:.2f} KB")

        try:
            content = self._pdf_extractor.extract(pdf_bytes)
        except PdfExtractionError as exc:
            Log.warning(f"PDF text extraction failed, treating as image-only: {exc}")
            content = PdfContent()

        title = meaningful_title(content.metadata.title) or strip_extension(request.file_name)
        text = content.text.strip()
        Log.info(f"PDF: {content.page_count} pages, {len(text)} chars extracted")

        if len(text) < self._settings.min_text_for_multimodal:
            Log.warning(
                f"PDF text extraction {'failed' if not text else 'minimal'} ({len(text)} chars), "
                "switching to multimodal analysis"
            )
            return self._analyze_multimodal(request, pdf_bytes, content, title)

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
            page_count=content.page_count,
        )
        fallback = {
            "title": title,
            "description": page_description(content.page_count),
            "tags": PDF_TAGS,
            "category": "other",
        }
        outcome = self._complete(prompt, fallback)
        return AnalysisResult.from_metadata(
            {**outcome.metadata, "extractedText": content.text},
            page_count=content.page_count,
        )

    def _analyze_multimodal(
        self,
        request: FileAnalysisRequest,
        pdf_bytes: bytes,
        content: PdfContent,
        title: str,
    ) -> AnalysisResult:
        fallback = {
            "title": title,
            "description": page_description(content.page_count),
            "tags": PDF_TAGS,
            "category": "other",
        }
        metadata_only = AnalysisResult.from_metadata(
            finalize(fallback, fallback), page_count=content.page_count
        )

        if len(pdf_bytes) > self._settings.max_pdf_size_bytes:
            Log.warning(
                f"PDF too large for inline processing "
                f"({len(pdf_bytes) // 1024} KB > {self._settings.max_pdf_size_bytes // 1024} KB)"
            )
            return metadata_only

        attachment = Attachment.inline_document(base64.b64encode(pdf_bytes).decode("ascii"))
        prompt = self._prompts.pdf_multimodal(
            request.file_name,
            metadata=content.metadata.as_dict(),
            extracted_text=content.text,
        )
        try:
            outcome = self._complete(prompt, fallback, attachments=[attachment])
        except ApiError as exc:
            if exc.propagates:
                raise
            Log.error(f"Multimodal PDF analysis failed: {exc.code.value} {exc.message}")
            return metadata_only

        if isinstance(outcome, FallbackUsed):
            return metadata_only
        Log.info("Multimodal PDF analysis complete")
        return AnalysisResult.from_metadata(
            {**outcome.metadata, "extractedText": outcome.metadata.get("extractedText") or content.text},
            page_count=content.page_count,
        )

    def _failure_metadata(self, request: FileAnalysisRequest) -> dict[str, Any]:
        return {
            "title": strip_extension(request.file_name),
            "description": "PDF document",
            "tags": PDF_TAGS,
            "category": "other",
        }
