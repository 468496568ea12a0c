class DeletionError(Exception):
    """Base exception for the deletion engine."""


class FingerprintError(DeletionError):
    """Raised when a buffer cannot be fingerprinted before destruction."""
