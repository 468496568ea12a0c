from datetime import datetime, timezone
from unittest.mock import MagicMock

from proofly.attestation.base import BaseLedgerClient
from proofly.attestation.emitter import AttestationEmitter, AttestationSchemas
from proofly.attestation.exceptions import LedgerError
from proofly.attestation.models import AuthorizationClaim, FulfillmentClaim
from proofly.deletion.models import DeletionCorrelation, DeletionReceipt, FileFingerprint

MOMENT = datetime(2026, 3, 1, tzinfo=timezone.utc)
SCHEMAS = AttestationSchemas(
    authorization="0x" + "1" * 64,
    fulfillment="0x" + "2" * 64,
    deletion="0x" + "3" * 64,
)


def _make_inputs() -> tuple[AuthorizationClaim, FulfillmentClaim, DeletionReceipt]:
    authorization = AuthorizationClaim("CO", "birth_certificate", "a" * 64, MOMENT)
    fulfillment = FulfillmentClaim(
        "CO", "birth_certificate", "ltr_1", "9400", "Vital Records", MOMENT, "PRF-2026-ABCD"
    )
    receipt = DeletionReceipt.issue(
        correlation=DeletionCorrelation("PRF-2026-ABCD", "ltr_1", "chk_1"),
        file_hashes=(FileFingerprint("photoId", "b" * 64),),
        deleted_at=0,
        deletion_method="blob_delete_plus_buffer_zeroize",
        all_files_deleted=True,
    )
    return authorization, fulfillment, receipt


class TestAttestationEmitter:
    def test_publishes_three_records_in_order(self) -> None:
        ledger = MagicMock(spec=BaseLedgerClient)
        ledger.publish.side_effect = ["0xauth", "0xfulfill", "0xdelete"]

        uids = AttestationEmitter(ledger, SCHEMAS).emit(*_make_inputs())

        assert uids.as_dict() == {
            "authorization": "0xauth",
            "fulfillment": "0xfulfill",
            "deletion": "0xdelete",
        }
        kinds = [call.args[1].kind for call in ledger.publish.call_args_list]
        assert kinds == ["authorization", "fulfillment", "deletion"]
        schema_ids = [call.args[0] for call in ledger.publish.call_args_list]
        assert schema_ids == [SCHEMAS.authorization, SCHEMAS.fulfillment, SCHEMAS.deletion]

    def test_revocable_flag_follows_record(self) -> None:
        ledger = MagicMock(spec=BaseLedgerClient)
        ledger.publish.return_value = "0xuid"

        AttestationEmitter(ledger, SCHEMAS).emit(*_make_inputs())

        flags = [call.kwargs["revocable"] for call in ledger.publish.call_args_list]
        assert flags == [True, False, False]

    def test_middle_failure_leaves_only_that_slot_empty(self) -> None:
        ledger = MagicMock(spec=BaseLedgerClient)
        ledger.publish.side_effect = ["0xauth", LedgerError("reverted"), "0xdelete"]

        uids = AttestationEmitter(ledger, SCHEMAS).emit(*_make_inputs())

        assert uids.authorization == "0xauth"
        assert uids.fulfillment is None
        assert uids.deletion == "0xdelete"

    def test_unexpected_exception_does_not_escape(self) -> None:
        ledger = MagicMock(spec=BaseLedgerClient)
        ledger.publish.side_effect = RuntimeError("rpc unreachable")

        uids = AttestationEmitter(ledger, SCHEMAS).emit(*_make_inputs())

        assert uids.published_count == 0

    def test_unconfigured_schema_skips_publish(self) -> None:
        ledger = MagicMock(spec=BaseLedgerClient)
        ledger.publish.return_value = "0xuid"
        schemas = AttestationSchemas(authorization="", fulfillment=SCHEMAS.fulfillment, deletion="")

        uids = AttestationEmitter(ledger, schemas).emit(*_make_inputs())

        assert ledger.publish.call_count == 1
        assert uids.as_dict() == {"authorization": None, "fulfillment": "0xuid", "deletion": None}

    def test_ledger_returning_none_is_empty_slot(self) -> None:
        ledger = MagicMock(spec=BaseLedgerClient)
        ledger.publish.return_value = None

        uids = AttestationEmitter(ledger, SCHEMAS).emit(*_make_inputs())

        assert uids.published_count == 0
