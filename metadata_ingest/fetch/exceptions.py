class FetchError(Exception):
    """Raised when an outbound fetch fails (network, timeout or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
