class LedgerError(Exception):
    """Raised when an attestation cannot be submitted or confirmed."""
