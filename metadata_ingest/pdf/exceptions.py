class PdfExtractionError(Exception):
    """Raised when a PDF cannot be opened or parsed."""
