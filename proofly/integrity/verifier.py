import hmac

from proofly.integrity.fingerprint import content_fingerprint, normalize_fingerprint
from proofly.logging.logger import Log


class TamperVerifier:
    """Checks fetched content against the fingerprint committed at upload time."""

    def verify(self, data: bytes | bytearray, expected_fingerprint: str) -> bool:
        """Return True when ``data`` hashes to ``expected_fingerprint``.

        A mismatch is reported as False, never raised; the caller decides
        whether it is fatal. Only the two digests are logged, never the content.
        """
        actual = content_fingerprint(data)
        expected = normalize_fingerprint(expected_fingerprint)
        if hmac.compare_digest(actual.encode("ascii"), expected.encode("ascii", "replace")):
            return True
        Log.warning(
            f"Fingerprint mismatch: expected {expected}, computed {actual}"
        )
        return False
