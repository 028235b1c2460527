import pymupdf

from metadata_ingest.extractors.models import PdfContent
from metadata_ingest.logging.logger import Log
from metadata_ingest.pdf.base import BasePdfExtractor, PageTextSource, build_metadata
from metadata_ingest.pdf.exceptions import PdfExtractionError


class _MuPdfPages(PageTextSource):
    def __init__(self, doc: pymupdf.Document) -> None:
        self._doc = doc
        self.page_count = doc.page_count

    def page_text(self, index: int) -> str:
        try:
            return self._doc.load_page(index).get_text()
        except Exception as exc:
            Log.warning(f"Error extracting PDF page {index + 1}: {exc}")
            return ""


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> PdfContent:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = _MuPdfPages(doc)
                metadata = build_metadata(dict(doc.metadata or {}))
                text = self._collect(pages)
                return PdfContent(text=text, page_count=pages.page_count, metadata=metadata)
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
