from dataclasses import dataclass

from proofly.attestation.base import BaseLedgerClient
from proofly.attestation.models import (
    AttestationRecord,
    AttestationUIDSet,
    AuthorizationClaim,
    FulfillmentClaim,
)
from proofly.attestation.records import (
    authorization_record,
    deletion_record,
    fulfillment_record,
)
from proofly.deletion.models import DeletionReceipt
from proofly.logging.logger import Log
from proofly.outcome import Outcome


@dataclass(frozen=True)
class AttestationSchemas:
    """Registered schema identifiers, one per record kind."""

    authorization: str
    fulfillment: str
    deletion: str


class AttestationEmitter:
    """Publishes the authorization, fulfillment and deletion attestations.

    The three publishes are independent: each failure is logged and leaves only
    its own slot empty. Nothing raises past ``emit``.
    """

    def __init__(self, ledger: BaseLedgerClient, schemas: AttestationSchemas) -> None:
        self._ledger = ledger
        self._schemas = schemas

    def emit(
        self,
        authorization: AuthorizationClaim,
        fulfillment: FulfillmentClaim,
        receipt: DeletionReceipt,
    ) -> AttestationUIDSet:
        ref = receipt.request_ref
        auth = self._publish(self._schemas.authorization, authorization_record(authorization), ref)
        fulfill = self._publish(self._schemas.fulfillment, fulfillment_record(fulfillment), ref)
        deletion = self._publish(self._schemas.deletion, deletion_record(receipt), ref)

        uids = AttestationUIDSet(
            authorization=auth.value,
            fulfillment=fulfill.value,
            deletion=deletion.value,
        )
        Log.info(f"Published {uids.published_count}/3 attestations for {ref}: {uids.as_dict()}")
        return uids

    def _publish(self, schema_id: str, record: AttestationRecord, request_ref: str) -> Outcome[str]:
        if not schema_id:
            Log.warning(f"No schema configured for {record.kind} attestation ({request_ref})")
            return Outcome.failure("schema not configured")
        try:
            uid = self._ledger.publish(schema_id, record, revocable=record.revocable)
        except Exception as exc:
            Log.error(f"{record.kind} attestation failed for {request_ref}: {exc}")
            return Outcome.failure(str(exc))
        if uid is None:
            return Outcome.failure("ledger returned no identifier")
        return Outcome.success(uid)
