import hashlib

FINGERPRINT_HEX_LENGTH = 64


def content_fingerprint(data: bytes | bytearray | memoryview) -> str:
    """Return the lowercase hex sha256 digest of ``data``.

    This is the same digest the browser computes at upload time, so it can be
    compared directly against the fingerprint committed before payment.
    """
    return hashlib.sha256(data).hexdigest()


def normalize_fingerprint(value: str) -> str:
    """Lowercase a hex fingerprint and strip whitespace and a ``0x`` prefix."""
    cleaned = value.strip().lower()
    if cleaned.startswith("0x"):
        cleaned = cleaned[2:]
    return cleaned
