from metadata_ingest.extractors.models import DocumentMetadata, DocxContent
from metadata_ingest.extractors.ooxml import (
    collapse_whitespace,
    first_element_text,
    open_archive,
    read_entry,
    read_optional_entry,
    text_runs,
)
from metadata_ingest.logging.logger import Log

DOCUMENT_ENTRY = "word/document.xml"
CORE_PROPERTIES_ENTRY = "docProps/core.xml"


class DocxExtractor:
    """Extracts raw text and core properties from a Word (.docx) package."""

    def __init__(self, max_chars: int = 50_000) -> None:
        self._max_chars = max_chars

    def extract(self, data: bytes) -> DocxContent:
        """Concatenate every ``<w:t>`` run; no layout reconstruction.

        Raises:
            ExtractionError: if the archive or its main document is unreadable.
        """
        with open_archive(data) as archive:
            document_xml = read_entry(archive, DOCUMENT_ENTRY)
            core_xml = read_optional_entry(archive, CORE_PROPERTIES_ENTRY)

        text = collapse_whitespace(" ".join(text_runs(document_xml, "w:t")))
        metadata = parse_core_properties(core_xml) if core_xml else DocumentMetadata()
        Log.info(f"DOCX extraction complete: {len(text)} chars")
        return DocxContent(text=text[: self._max_chars], metadata=metadata)


def parse_core_properties(core_xml: str) -> DocumentMetadata:
    """Read title/creator/subject/keywords from ``docProps/core.xml``."""
    keywords_raw = first_element_text(core_xml, "cp:keywords")
    keywords = [k.strip() for k in keywords_raw.split(",") if k.strip()]
    return DocumentMetadata(
        title=first_element_text(core_xml, "dc:title"),
        author=first_element_text(core_xml, "dc:creator"),
        subject=first_element_text(core_xml, "dc:subject"),
        keywords=keywords,
    )
