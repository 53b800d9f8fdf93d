"""
Exceptions raised by the store and service layers.

The CLI catches JotterError and reports the message; nothing retries.
"""


class JotterError(Exception):
    """Base class for every error JotterXpress reports to the user."""


class EmptyContentError(JotterError):
    """Raised when a note body is blank after trimming."""

    def __init__(self, kind: str = "note"):
        self.kind = kind
        super().__init__(f"{kind} content cannot be empty")


class InvalidDateFormatError(JotterError):
    """Raised when a date string is not YYYY-MM-DD."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid date format '{value}', expected YYYY-MM-DD")


class InvalidMonthFormatError(JotterError):
    """Raised when a month string is not YYYY-MM."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid month format '{value}', expected YYYY-MM")


class StorageError(JotterError):
    """Raised when a bucket file or the notes directory cannot be used."""


class DecodeError(JotterError):
    """Raised when a bucket file does not hold a JSON array of notes."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot decode {path}: {reason}")


class UnsupportedOperationError(JotterError):
    """Raised for operations the store or service does not offer."""
