from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from proofly.attestation.models import AttestationUIDSet
from proofly.deletion.models import DeletionReceipt, TransientBuffer
from proofly.jurisdictions.models import JurisdictionConfig
from proofly.mailing.models import FeeReceipt, MailReceipt
from proofly.processor.models import FulfillmentRequest, FulfillmentResult


class FulfillmentState(str, Enum):
    START = "start"
    CONFIG_LOADED = "config_loaded"
    FILE_FETCHED = "file_fetched"
    VERIFIED = "verified"
    FORM_FILLED = "form_filled"
    LETTER_GENERATED = "letter_generated"
    PACKET_BUILT = "packet_built"
    MAILED = "mailed"
    FEE_PAID = "fee_paid"
    DELETED = "deleted"
    ATTESTED = "attested"
    NOTIFIED = "notified"
    DONE = "done"
    ERROR_RECOVERY = "error_recovery"


HAPPY_PATH: tuple[FulfillmentState, ...] = (
    FulfillmentState.START,
    FulfillmentState.CONFIG_LOADED,
    FulfillmentState.FILE_FETCHED,
    FulfillmentState.VERIFIED,
    FulfillmentState.FORM_FILLED,
    FulfillmentState.LETTER_GENERATED,
    FulfillmentState.PACKET_BUILT,
    FulfillmentState.MAILED,
    FulfillmentState.FEE_PAID,
    FulfillmentState.DELETED,
    FulfillmentState.ATTESTED,
    FulfillmentState.NOTIFIED,
    FulfillmentState.DONE,
)

NEXT_STATE: dict[FulfillmentState, FulfillmentState] = dict(zip(HAPPY_PATH, HAPPY_PATH[1:]))


@dataclass(frozen=True, slots=True)
class PipelineContext:
    """State of one fulfillment run.

    Each step returns a new context via ``advance``; earlier snapshots are
    never mutated. The byte buffers inside are the one exception: they are
    shared so that deletion and recovery can zero them in place.
    """

    request: FulfillmentRequest
    request_ref: str
    started_at: datetime
    state: FulfillmentState = FulfillmentState.START
    jurisdiction: JurisdictionConfig | None = None
    id_file: TransientBuffer | None = None
    id_content_type: str = ""
    filled_form: TransientBuffer | None = None
    consent_letter: TransientBuffer | None = None
    packet: TransientBuffer | None = None
    mail: MailReceipt | None = None
    mailed_at: datetime | None = None
    fee: FeeReceipt | None = None
    deletion_receipt: DeletionReceipt | None = None
    attestations: AttestationUIDSet | None = None
    result: FulfillmentResult | None = None
    notified: bool = False

    def advance(self, state: FulfillmentState, **changes: Any) -> "PipelineContext":
        return replace(self, state=state, **changes)

    def buffers(self) -> list[TransientBuffer]:
        """Every buffer created so far, in creation order."""
        candidates = (self.id_file, self.filled_form, self.consent_letter, self.packet)
        return [b for b in candidates if b is not None]

    def require_jurisdiction(self) -> JurisdictionConfig:
        if self.jurisdiction is None:
            raise ValueError("PipelineContext.jurisdiction must be set before this step")
        return self.jurisdiction


class PipelineStep(ABC):
    target_state: ClassVar[FulfillmentState]

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
