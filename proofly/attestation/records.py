"""Schema-typed ledger records for the three public attestations.

None of these records carries personal data: the signature and every file
appear only as fixed-width digests.
"""

from datetime import datetime

from proofly.attestation.models import (
    AttestationRecord,
    AuthorizationClaim,
    FulfillmentClaim,
    SchemaField,
)
from proofly.deletion.models import DeletionReceipt
from proofly.integrity.fingerprint import normalize_fingerprint

ZERO_ADDRESS = "0x" + "0" * 40


def to_bytes32_hex(digest: str) -> str:
    """Pad or truncate a hex digest to a 0x-prefixed 32-byte word."""
    return "0x" + normalize_fingerprint(digest)[:64].ljust(64, "0")


def _epoch_seconds(moment: datetime) -> int:
    return int(moment.timestamp())


def authorization_record(claim: AuthorizationClaim) -> AttestationRecord:
    return AttestationRecord(
        kind="authorization",
        fields=(
            SchemaField("requestor", "address", ZERO_ADDRESS),
            SchemaField("stateCode", "string", claim.jurisdiction_code),
            SchemaField("requestType", "string", claim.request_type),
            SchemaField("signatureHash", "bytes32", to_bytes32_hex(claim.signature_digest)),
            SchemaField("authorizedAt", "uint256", _epoch_seconds(claim.authorized_at)),
            SchemaField("agentAuthorized", "bool", claim.agent_authorized),
        ),
        revocable=True,
    )


def fulfillment_record(claim: FulfillmentClaim) -> AttestationRecord:
    return AttestationRecord(
        kind="fulfillment",
        fields=(
            SchemaField("stateCode", "string", claim.jurisdiction_code),
            SchemaField("requestType", "string", claim.request_type),
            SchemaField("mailId", "string", claim.mail_id),
            SchemaField("trackingNumber", "string", claim.tracking_number or ""),
            SchemaField("mailedToName", "string", claim.mailed_to_name),
            SchemaField("mailedAt", "uint256", _epoch_seconds(claim.mailed_at)),
            SchemaField("requestRef", "string", claim.request_ref),
        ),
        revocable=False,
    )


def deletion_record(receipt: DeletionReceipt) -> AttestationRecord:
    return AttestationRecord(
        kind="deletion",
        fields=(
            SchemaField(
                "fileHashes",
                "bytes32[]",
                [to_bytes32_hex(h.sha256) for h in receipt.file_hashes],
            ),
            SchemaField("deletedAt", "uint256", receipt.deleted_at),
            SchemaField("deletionMethod", "string", receipt.deletion_method),
            SchemaField("allFilesDeleted", "bool", receipt.all_files_deleted),
            SchemaField("receiptHash", "bytes32", to_bytes32_hex(receipt.receipt_hash)),
            SchemaField("requestRef", "string", receipt.request_ref),
        ),
        revocable=False,
    )
