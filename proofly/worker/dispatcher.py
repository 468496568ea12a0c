from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from proofly.cache.result_cache import FulfillmentResultCache
from proofly.config.settings import Settings
from proofly.logging.logger import Log
from proofly.processor.exceptions import InvalidRequestError
from proofly.processor.models import FulfillmentRequest
from proofly.processor.processor import Processor


@dataclass(frozen=True)
class Acknowledgement:
    """Immediate reply to the payment trigger. Never carries run errors."""

    received: bool = True
    accepted: bool = False
    reason: str = ""


class FulfillmentDispatcher:
    """Fire-and-forget execution of fulfillment runs on a worker pool.

    ``dispatch`` returns as soon as the run is scheduled. The run's outcome
    only reaches the logs, the result cache and the applicant's inbox.
    """

    def __init__(
        self,
        processor: Processor,
        cache: FulfillmentResultCache,
        settings: Settings,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._processor = processor
        self._cache = cache
        self._dedupe_runs = settings.dedupe_runs
        self._executor = executor or ThreadPoolExecutor(
            max_workers=settings.dispatcher_max_workers,
            thread_name_prefix="fulfillment",
        )

    def dispatch(self, request: FulfillmentRequest | None) -> Acknowledgement:
        if request is None:
            return Acknowledgement(accepted=False, reason="ignored")

        try:
            request.validate()
        except InvalidRequestError as exc:
            Log.error(f"Rejected trigger for session {request.session_id}: {exc}")
            return Acknowledgement(accepted=False, reason="invalid")

        if self._dedupe_runs:
            claim = self._cache.claim(request.session_id)
            if claim.ok and not claim.value:
                Log.warning(f"Session {request.session_id} already dispatched, skipping")
                return Acknowledgement(accepted=False, reason="duplicate")

        self._submit(request)
        Log.info(f"Dispatched fulfillment for session {request.session_id}")
        return Acknowledgement(accepted=True)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _submit(self, request: FulfillmentRequest) -> Future[None]:
        return self._executor.submit(self._run, request)

    def _run(self, request: FulfillmentRequest) -> None:
        try:
            result = self._processor.process(request)
        except Exception as exc:
            # no retry: manual recovery re-dispatches the same session
            Log.error(f"Fulfillment failed for session {request.session_id}: {exc}")
            if self._dedupe_runs:
                self._cache.release(request.session_id)
            return
        Log.info(f"Processed {result.request_ref} for session {request.session_id}")
