"""Errors raised to callers of the browsing API."""


class QueuePeekError(Exception):
    """Base exception for browsing errors."""

    pass


class InvalidPageRequestError(QueuePeekError, ValueError):
    """Raised when a page number or page size is not positive."""

    def __init__(self, field: str, value: int) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} must be >= 1, got {value}")
