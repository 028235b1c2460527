class NormalizationError(Exception):
    """Raised when an AI answer cannot be decoded into a metadata object."""
