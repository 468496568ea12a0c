from typing import Any

from proofly.cache.result_cache import FulfillmentResultCache

COMPLETE = "complete"
PROCESSING = "processing"
TIMEOUT = "timeout"

TIMEOUT_MESSAGE = (
    "Your request is still being processed. "
    "We will email your confirmation and tracking details as soon as it is mailed."
)


class FulfillmentStatusReader:
    """Answers the confirmation page's status poll from the result cache.

    The caller only ever sees complete, processing or timeout. Cache errors
    read as processing.
    """

    def __init__(self, cache: FulfillmentResultCache, timeout_seconds: int) -> None:
        self._cache = cache
        self._timeout_seconds = timeout_seconds

    def status(self, session_id: str, waited_seconds: float = 0) -> dict[str, Any]:
        outcome = self._cache.lookup(session_id)
        if outcome.ok and outcome.value:
            return {"status": COMPLETE, **outcome.value}
        if waited_seconds >= self._timeout_seconds:
            return {"status": TIMEOUT, "message": TIMEOUT_MESSAGE}
        return {"status": PROCESSING}
