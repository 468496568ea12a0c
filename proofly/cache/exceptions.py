class ResultCacheError(Exception):
    """Raised when the result cache backend cannot be read or written."""
