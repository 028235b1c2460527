import io

import pdfplumber

from metadata_ingest.extractors.models import PdfContent
from metadata_ingest.logging.logger import Log
from metadata_ingest.pdf.base import BasePdfExtractor, PageTextSource, build_metadata
from metadata_ingest.pdf.exceptions import PdfExtractionError


class _PlumberPages(PageTextSource):
    def __init__(self, pdf: pdfplumber.PDF) -> None:
        self._pdf = pdf
        self.page_count = len(pdf.pages)

    def page_text(self, index: int) -> str:
        try:
            return self._pdf.pages[index].extract_text() or ""
        except Exception as exc:
            Log.warning(f"Error extracting PDF page {index + 1}: {exc}")
            return ""


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> PdfContent:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = _PlumberPages(pdf)
                metadata = build_metadata(dict(pdf.metadata or {}))
                text = self._collect(pages)
                return PdfContent(text=text, page_count=pages.page_count, metadata=metadata)
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
