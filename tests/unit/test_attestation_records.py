from datetime import datetime, timezone

from proofly.attestation.models import (
    AttestationRecord,
    AttestationUIDSet,
    AuthorizationClaim,
    FulfillmentClaim,
)
from proofly.attestation.records import (
    ZERO_ADDRESS,
    authorization_record,
    deletion_record,
    fulfillment_record,
    to_bytes32_hex,
)
from proofly.deletion.models import DeletionCorrelation, DeletionReceipt, FileFingerprint

MOMENT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _make_receipt() -> DeletionReceipt:
    return DeletionReceipt.issue(
        correlation=DeletionCorrelation("PRF-2026-ABCD", "ltr_1", "chk_1"),
        file_hashes=(FileFingerprint("photoId", "c" * 64), FileFingerprint("filledForm", "d" * 64)),
        deleted_at=1_772_366_400_000,
        deletion_method="blob_delete_plus_buffer_zeroize",
        all_files_deleted=True,
    )


def _values(record: AttestationRecord) -> dict[str, object]:
    return {f.name: f.value for f in record.fields}


class TestToBytes32Hex:
    def test_prefixes_digest(self) -> None:
        assert to_bytes32_hex("a" * 64) == "0x" + "a" * 64

    def test_normalizes_case_and_prefix(self) -> None:
        assert to_bytes32_hex("0x" + "A" * 64) == "0x" + "a" * 64


class TestAuthorizationRecord:
    def test_fields_and_revocable(self) -> None:
        record = authorization_record(
            AuthorizationClaim(
                jurisdiction_code="CO",
                request_type="birth_certificate",
                signature_digest="e" * 64,
                authorized_at=MOMENT,
            )
        )
        values = _values(record)
        assert record.revocable is True
        assert values["requestor"] == ZERO_ADDRESS
        assert values["stateCode"] == "CO"
        assert values["signatureHash"] == "0x" + "e" * 64
        assert values["authorizedAt"] == int(MOMENT.timestamp())
        assert values["agentAuthorized"] is True

    def test_schema_definition(self) -> None:
        record = authorization_record(
            AuthorizationClaim("CO", "birth_certificate", "e" * 64, MOMENT)
        )
        assert record.schema_definition == (
            "address requestor,string stateCode,string requestType,"
            "bytes32 signatureHash,uint256 authorizedAt,bool agentAuthorized"
        )


class TestFulfillmentRecord:
    def test_missing_tracking_number_is_empty_string(self) -> None:
        record = fulfillment_record(
            FulfillmentClaim(
                jurisdiction_code="CO",
                request_type="birth_certificate",
                mail_id="ltr_1",
                tracking_number=None,
                mailed_to_name="Vital Records Section, CDPHE",
                mailed_at=MOMENT,
                request_ref="PRF-2026-ABCD",
            )
        )
        values = _values(record)
        assert record.revocable is False
        assert values["trackingNumber"] == ""
        assert values["mailId"] == "ltr_1"
        assert values["requestRef"] == "PRF-2026-ABCD"


class TestDeletionRecord:
    def test_contains_only_digests(self) -> None:
        receipt = _make_receipt()
        values = _values(deletion_record(receipt))
        assert values["fileHashes"] == ["0x" + "c" * 64, "0x" + "d" * 64]
        assert values["receiptHash"] == "0x" + receipt.receipt_hash
        assert values["deletedAt"] == receipt.deleted_at
        assert values["allFilesDeleted"] is True


class TestAttestationUIDSet:
    def test_published_count(self) -> None:
        uids = AttestationUIDSet(authorization="0x1", fulfillment=None, deletion="0x3")
        assert uids.published_count == 2
        assert uids.as_dict() == {"authorization": "0x1", "fulfillment": None, "deletion": "0x3"}
