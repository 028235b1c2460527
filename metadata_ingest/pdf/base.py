from abc import ABC, abstractmethod

from metadata_ingest.extractors.models import DocumentMetadata, PdfContent
from metadata_ingest.extractors.ooxml import collapse_whitespace


class PageTextSource(ABC):
    """Per-engine view over an opened document."""

    page_count: int

    @abstractmethod
    def page_text(self, index: int) -> str:
        """Text for one page, or an empty string if the page cannot be read."""


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    def __init__(self, max_pages: int = 10, max_chars: int = 50_000) -> None:
        self._max_pages = max_pages
        self._max_chars = max_chars

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfContent:
        """Extract text page by page, plus document info.

        Stops after ``max_pages`` pages or once ``max_chars`` characters have
        been collected. A page that fails to parse is skipped.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfContent with the joined page text, total page count and metadata.

        Raises:
            PdfExtractionError: if the document cannot be opened at all.
        """

    def _collect(self, pages: PageTextSource) -> str:
        """Accumulate cleaned page text until the page or character cap is hit."""
        parts: list[str] = []
        total = 0
        for index in range(min(pages.page_count, self._max_pages)):
            if total >= self._max_chars:
                break
            text = collapse_whitespace(pages.page_text(index))
            if text:
                parts.append(text)
                total += len(text)
        return "\n\n".join(parts)[: self._max_chars]


def build_metadata(info: dict[str, object]) -> DocumentMetadata:
    """Normalize engine-specific info dicts (``Title`` vs ``title``)."""

    def pick(*keys: str) -> str:
        for key in keys:
            value = info.get(key)
            if isinstance(value, bytes):
                value = value.decode("utf-8", errors="replace")
            if isinstance(value, str) and value.strip():
                return value.strip()
        return ""

    keywords = pick("Keywords", "keywords")
    return DocumentMetadata(
        title=pick("Title", "title"),
        author=pick("Author", "author"),
        subject=pick("Subject", "subject"),
        keywords=[k.strip() for k in keywords.replace(";", ",").split(",") if k.strip()],
    )
