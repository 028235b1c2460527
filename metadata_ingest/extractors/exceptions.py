class ExtractionError(Exception):
    """Raised when a document cannot be parsed into text or structure."""


class ArchiveEntryMissingError(ExtractionError):
    """Raised when a required entry is absent from an OOXML archive."""
