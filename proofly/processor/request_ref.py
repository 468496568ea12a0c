import secrets
from datetime import datetime, timezone

# Uppercase letters and digits without I, O, 0 and 1
REF_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
REF_SUFFIX_LENGTH = 4


def generate_request_ref(now: datetime | None = None) -> str:
    """Return a human-readable reference such as ``PRF-2026-K7QM``."""
    year = (now or datetime.now(timezone.utc)).year
    suffix = "".join(secrets.choice(REF_ALPHABET) for _ in range(REF_SUFFIX_LENGTH))
    return f"PRF-{year}-{suffix}"
