from typing import Any

from proofly.cache.base import BaseResultCache
from proofly.logging.logger import Log
from proofly.outcome import Outcome
from proofly.processor.models import FulfillmentResult

RESULT_KEY_PREFIX = "fulfillment:"
CLAIM_KEY_PREFIX = "fulfillment-claim:"


class FulfillmentResultCache:
    """Session-keyed view over the result cache.

    Every call returns an Outcome; an unreachable backend never fails a run.
    """

    def __init__(self, backend: BaseResultCache, ttl_seconds: int) -> None:
        self._backend = backend
        self._ttl = ttl_seconds

    def store(self, session_id: str, result: FulfillmentResult) -> Outcome[None]:
        try:
            self._backend.put(f"{RESULT_KEY_PREFIX}{session_id}", result.to_cache_entry(), self._ttl)
        except Exception as exc:
            Log.warning(f"Result cache write failed for {result.request_ref}: {exc}")
            return Outcome.failure(str(exc))
        return Outcome.success()

    def lookup(self, session_id: str) -> Outcome[dict[str, Any] | None]:
        try:
            return Outcome.success(self._backend.get(f"{RESULT_KEY_PREFIX}{session_id}"))
        except Exception as exc:
            Log.warning(f"Result cache read failed for session {session_id}: {exc}")
            return Outcome.failure(str(exc))

    def claim(self, session_id: str) -> Outcome[bool]:
        """Mark a session as taken. ``value`` is False when another run holds it."""
        try:
            claimed = self._backend.put_if_absent(
                f"{CLAIM_KEY_PREFIX}{session_id}", {"claimed": True}, self._ttl
            )
        except Exception as exc:
            Log.warning(f"Run claim failed for session {session_id}: {exc}")
            return Outcome.failure(str(exc))
        return Outcome.success(claimed)

    def release(self, session_id: str) -> Outcome[None]:
        """Drop a session's claim so the same trigger can be dispatched again."""
        try:
            self._backend.delete(f"{CLAIM_KEY_PREFIX}{session_id}")
        except Exception as exc:
            Log.warning(f"Run claim release failed for session {session_id}: {exc}")
            return Outcome.failure(str(exc))
        return Outcome.success()
