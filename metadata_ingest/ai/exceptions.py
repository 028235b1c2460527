class PromptLoadError(Exception):
    """Raised when a bundled prompt template or tool schema cannot be loaded."""
