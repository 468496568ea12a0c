from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from pathlib import Path

from proofly.attestation.factory import AttestationEmitterFactory
from proofly.cache.factory import ResultCacheFactory
from proofly.cache.result_cache import FulfillmentResultCache
from proofly.config.settings import Settings
from proofly.deletion.engine import DeletionEngine
from proofly.integrity.verifier import TamperVerifier
from proofly.logging.logger import Log
from proofly.mailing.factory import MailingGatewayFactory
from proofly.notification.factory import NotifierFactory
from proofly.pdf.consent_letter import ConsentLetterGenerator
from proofly.pdf.form_filler import AcroFormFiller
from proofly.pdf.packet_builder import PdfPacketBuilder
from proofly.processor.exceptions import PipelineStateError
from proofly.processor.models import FulfillmentRequest, FulfillmentResult
from proofly.processor.pipeline import (
    NEXT_STATE,
    FulfillmentState,
    PipelineContext,
    PipelineStep,
)
from proofly.processor.request_ref import generate_request_ref
from proofly.processor.steps import (
    AttestStep,
    BuildPacketStep,
    DeleteStep,
    ErrorRecoveryStep,
    FetchFileStep,
    FillFormStep,
    GenerateLetterStep,
    LoadConfigStep,
    MailFeeStep,
    MailPacketStep,
    NotifyStep,
    PublishResultStep,
    VerifyFileStep,
)
from proofly.storage.factory import BlobStoreFactory


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Processor:
    """Runs one fulfillment request through the state machine.

    Preflight steps (config lookup) run before anything is fetched, so their
    failures need no cleanup and propagate directly. A failure in any later
    step runs recovery first and then re-raises the original exception.
    """

    def __init__(
        self,
        preflight_steps: Sequence[PipelineStep],
        steps: Sequence[PipelineStep],
        recovery: ErrorRecoveryStep,
        clock: Callable[[], datetime] = _utcnow,
        ref_factory: Callable[[], str] = generate_request_ref,
    ) -> None:
        self._preflight_steps = list(preflight_steps)
        self._steps = list(steps)
        self._recovery = recovery
        self._clock = clock
        self._ref_factory = ref_factory

    def process(self, request: FulfillmentRequest) -> FulfillmentResult:
        """Fulfill ``request`` and return its result.

        Raises:
            InvalidRequestError: before any I/O, when fields are missing.
            UnknownJurisdictionError: before any I/O.
            Exception: any fatal step error, after recovery has run.
        """
        request.validate()
        context = PipelineContext(
            request=request,
            request_ref=self._ref_factory(),
            started_at=self._clock(),
        )
        Log.info(f"Starting fulfillment {context.request_ref} for session {request.session_id}")

        for step in self._preflight_steps:
            context = self._run_step(step, context)

        try:
            for step in self._steps:
                context = self._run_step(step, context)
        except Exception as exc:
            self._recovery.run(context, exc)
            raise

        if context.state is not FulfillmentState.DONE or context.result is None:
            raise PipelineStateError(
                f"Fulfillment {context.request_ref} ended in state '{context.state.value}'"
            )
        return context.result

    @staticmethod
    def _run_step(step: PipelineStep, context: PipelineContext) -> PipelineContext:
        expected = NEXT_STATE.get(context.state)
        if step.target_state is not expected:
            raise PipelineStateError(
                f"{type(step).__name__} cannot run after state '{context.state.value}'"
            )
        next_context = step.run(context)
        if next_context.state is not expected:
            raise PipelineStateError(
                f"{type(step).__name__} produced state '{next_context.state.value}', "
                f"expected '{expected.value}'"
            )
        return next_context


def build_processor(
    settings: Settings,
    result_cache: FulfillmentResultCache | None = None,
    forms_root: Path | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    store = BlobStoreFactory.create(settings)
    gateway = MailingGatewayFactory.create(settings)
    emitter = AttestationEmitterFactory.create(settings)
    notifier = NotifierFactory.create(settings)
    cache = result_cache if result_cache is not None else ResultCacheFactory.create(settings)

    steps: list[PipelineStep] = [
        FetchFileStep(store),
        VerifyFileStep(TamperVerifier()),
        FillFormStep(AcroFormFiller(forms_root or Path(settings.forms_root))),
        GenerateLetterStep(
            ConsentLetterGenerator(agent_name="Proofly", agent_contact=settings.support_email)
        ),
        BuildPacketStep(PdfPacketBuilder()),
        MailPacketStep(gateway),
        MailFeeStep(gateway),
        DeleteStep(DeletionEngine(store)),
        AttestStep(emitter, request_type=settings.request_type),
        NotifyStep(notifier),
        PublishResultStep(cache),
    ]
    return Processor(
        preflight_steps=[LoadConfigStep()],
        steps=steps,
        recovery=ErrorRecoveryStep(store),
    )
