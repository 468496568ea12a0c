class StorageError(Exception):
    """Base exception for the transient upload store."""


class FetchError(StorageError):
    """Raised when an uploaded file cannot be fetched."""
