import os
import re
from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from proofly.attestation.base import BaseLedgerClient
from proofly.attestation.emitter import AttestationEmitter, AttestationSchemas
from proofly.attestation.exceptions import LedgerError
from proofly.cache.base import BaseResultCache
from proofly.cache.exceptions import ResultCacheError
from proofly.cache.memory_adapter import InMemoryResultCache
from proofly.cache.result_cache import FulfillmentResultCache
from proofly.deletion.engine import DeletionEngine
from proofly.integrity.fingerprint import content_fingerprint
from proofly.integrity.verifier import TamperVerifier
from proofly.jurisdictions.exceptions import UnknownJurisdictionError
from proofly.mailing.base import BaseMailingGateway
from proofly.mailing.exceptions import MailingError
from proofly.mailing.models import FeeReceipt, MailReceipt
from proofly.notification.base import BaseEmailSender
from proofly.notification.confirmation import ConfirmationNotifier
from proofly.notification.exceptions import NotificationError
from proofly.pdf.base import BaseFormFiller, BaseLetterGenerator, BasePacketBuilder
from proofly.processor.exceptions import (
    InvalidRequestError,
    PipelineStateError,
    TamperDetectedError,
)
from proofly.processor.processor import Processor
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
from proofly.storage.base import BaseBlobStore, FetchedFile
from proofly.storage.exceptions import FetchError
from tests.factories import make_request

REF_PATTERN = re.compile(r"^PRF-\d{4}-[A-HJ-NP-Z2-9]{4}$")
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
SCHEMAS = AttestationSchemas(
    authorization="0x" + "1" * 64,
    fulfillment="0x" + "2" * 64,
    deletion="0x" + "3" * 64,
)


def _fake_jpeg(size: int = 12 * 1024) -> bytes:
    return b"\xff\xd8\xff\xe0" + os.urandom(size - 4)


class _Pipeline:
    """Processor wired with real steps over doubled adapters."""

    def __init__(
        self,
        file_bytes: bytes,
        content_type: str = "image/jpeg",
        cache_backend: BaseResultCache | None = None,
    ) -> None:
        self.store = MagicMock(spec=BaseBlobStore)
        self.store.fetch_bytes.return_value = FetchedFile(data=file_bytes, content_type=content_type)
        self.store.delete.return_value = True

        self.filler = MagicMock(spec=BaseFormFiller)
        self.filler.fill.return_value = b"%PDF-form"
        self.generator = MagicMock(spec=BaseLetterGenerator)
        self.generator.generate.return_value = b"%PDF-letter"
        self.builder = MagicMock(spec=BasePacketBuilder)
        self.builder.build.return_value = b"%PDF-packet"

        self.gateway = MagicMock(spec=BaseMailingGateway)
        self.gateway.mail_packet.return_value = MailReceipt(
            mail_id="ltr_123", tracking_number="9400111", expected_delivery_date="2026-03-05"
        )
        self.gateway.mail_fee_instrument.return_value = FeeReceipt(check_id="chk_456", status="created")

        self.ledger = MagicMock(spec=BaseLedgerClient)
        self.ledger.publish.side_effect = ["0xauth", "0xfulfill", "0xdelete"]

        self.sender = MagicMock(spec=BaseEmailSender)
        self.cache_backend = cache_backend if cache_backend is not None else InMemoryResultCache()
        self.cache = FulfillmentResultCache(self.cache_backend, ttl_seconds=60)

        steps = [
            FetchFileStep(self.store),
            VerifyFileStep(TamperVerifier()),
            FillFormStep(self.filler, clock=lambda: NOW),
            GenerateLetterStep(self.generator, clock=lambda: NOW),
            BuildPacketStep(self.builder),
            MailPacketStep(self.gateway, clock=lambda: NOW),
            MailFeeStep(self.gateway),
            DeleteStep(DeletionEngine(self.store, clock=lambda: 1_772_366_400_000)),
            AttestStep(AttestationEmitter(self.ledger, SCHEMAS), request_type="birth_certificate"),
            NotifyStep(
                ConfirmationNotifier(
                    sender=self.sender,
                    explorer_url="https://explorer.example.com/view",
                    support_email="help@example.com",
                )
            ),
            PublishResultStep(self.cache),
        ]
        self.processor = Processor(
            preflight_steps=[LoadConfigStep()],
            steps=steps,
            recovery=ErrorRecoveryStep(self.store),
            clock=lambda: NOW,
        )

    def fetched_buffer(self) -> bytearray:
        """The live id buffer handed to the packet builder."""
        return self.builder.build.call_args.args[2]


class TestProcessorHappyPath:
    def test_colorado_three_copies_end_to_end(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        result = pipeline.processor.process(make_request(file_bytes, copies=3))

        assert REF_PATTERN.match(result.request_ref)
        assert len(result.deletion_receipt_hash) == 64
        int(result.deletion_receipt_hash, 16)
        assert result.mail_id == "ltr_123"
        assert result.fee_id == "chk_456"
        assert result.fee_status == "created"
        assert result.tracking_number == "9400111"
        assert result.mailed_at == NOW.isoformat()
        assert result.all_files_deleted is True
        assert result.attestation_uids.as_dict() == {
            "authorization": "0xauth",
            "fulfillment": "0xfulfill",
            "deletion": "0xdelete",
        }

    def test_mails_packet_to_agency_and_fee_for_copies(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        result = pipeline.processor.process(make_request(file_bytes, copies=3))

        packet_kwargs = pipeline.gateway.mail_packet.call_args.kwargs
        assert packet_kwargs["packet"] == b"%PDF-packet"
        assert packet_kwargs["destination"].name == "Vital Records Section, CDPHE"
        assert packet_kwargs["sender"].name == "Jane Q Public"
        assert packet_kwargs["description"] == f"Colorado Birth Certificate Request - {result.request_ref}"
        fee_kwargs = pipeline.gateway.mail_fee_instrument.call_args.kwargs
        assert fee_kwargs["copies"] == 3
        assert fee_kwargs["config"].code == "CO"

    def test_buffers_zeroed_and_upload_deleted(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        pipeline.processor.process(make_request(file_bytes))

        form, letter, id_file, _ = pipeline.builder.build.call_args.args
        assert not any(id_file)
        assert not any(form)
        assert not any(letter)
        pipeline.store.delete.assert_called_once_with("https://store.example.com/uploads/id.jpg")

    def test_deletion_attestation_lists_three_fingerprints(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        pipeline.processor.process(make_request(file_bytes))

        deletion_record = pipeline.ledger.publish.call_args_list[2].args[1]
        hashes = {f.name: f.value for f in deletion_record.fields}["fileHashes"]
        assert len(hashes) == 3

    def test_result_published_to_cache(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        result = pipeline.processor.process(make_request(file_bytes))

        assert pipeline.cache.lookup("cs_test_123").value == result.to_cache_entry()

    def test_confirmation_email_sent(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        result = pipeline.processor.process(make_request(file_bytes))

        assert pipeline.sender.send.call_args.kwargs["to"] == "jane@example.com"
        assert result.deletion_receipt_hash in pipeline.sender.send.call_args.kwargs["text"]


class TestProcessorDegradedPaths:
    def test_email_failure_is_not_fatal(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        pipeline.sender.send.side_effect = NotificationError("provider down")

        result = pipeline.processor.process(make_request(file_bytes))

        assert result.mail_id == "ltr_123"
        assert pipeline.cache.lookup("cs_test_123").value is not None

    def test_partial_attestation_failure(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        pipeline.ledger.publish.side_effect = ["0xauth", LedgerError("reverted"), "0xdelete"]

        result = pipeline.processor.process(make_request(file_bytes))

        assert result.attestation_uids.as_dict() == {
            "authorization": "0xauth",
            "fulfillment": None,
            "deletion": "0xdelete",
        }

    def test_failed_remote_delete_is_reported(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        pipeline.store.delete.return_value = False

        result = pipeline.processor.process(make_request(file_bytes))

        assert result.all_files_deleted is False
        pipeline.store.delete.assert_called_once()

    def test_cache_failure_is_not_fatal(self) -> None:
        file_bytes = _fake_jpeg()
        backend = MagicMock(spec=BaseResultCache)
        backend.put.side_effect = ResultCacheError("down")
        pipeline = _Pipeline(file_bytes, cache_backend=backend)

        result = pipeline.processor.process(make_request(file_bytes))

        assert result.mail_id == "ltr_123"


class TestProcessorFailures:
    def test_fingerprint_mismatch_mails_nothing(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        with pytest.raises(TamperDetectedError):
            pipeline.processor.process(make_request(file_bytes, fingerprint="0" * 64))

        pipeline.gateway.mail_packet.assert_not_called()
        pipeline.gateway.mail_fee_instrument.assert_not_called()
        pipeline.filler.fill.assert_not_called()
        pipeline.store.delete.assert_called_once_with("https://store.example.com/uploads/id.jpg")

    def test_fingerprint_off_by_one_character_mails_nothing(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        fingerprint = content_fingerprint(file_bytes)
        altered = fingerprint[:-1] + ("0" if fingerprint[-1] != "0" else "1")

        with pytest.raises(TamperDetectedError):
            pipeline.processor.process(make_request(file_bytes, fingerprint=altered))

        pipeline.gateway.mail_packet.assert_not_called()
        pipeline.gateway.mail_fee_instrument.assert_not_called()

    def test_fetch_failure_runs_recovery_and_reraises(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        error = FetchError("Failed to fetch upload: 404 Not Found")
        pipeline.store.fetch_bytes.side_effect = error

        with pytest.raises(FetchError) as excinfo:
            pipeline.processor.process(make_request(file_bytes))

        assert excinfo.value is error
        pipeline.store.delete.assert_called_once_with("https://store.example.com/uploads/id.jpg")
        pipeline.gateway.mail_packet.assert_not_called()

    def test_recovery_delete_error_does_not_mask_original(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        pipeline.store.fetch_bytes.side_effect = FetchError("gone")
        pipeline.store.delete.side_effect = RuntimeError("store down")

        with pytest.raises(FetchError, match="gone"):
            pipeline.processor.process(make_request(file_bytes))

    def test_mailing_failure_zeroes_buffers(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        pipeline.gateway.mail_packet.side_effect = MailingError("Lob letters request rejected: 422")

        with pytest.raises(MailingError):
            pipeline.processor.process(make_request(file_bytes))

        assert not any(pipeline.fetched_buffer())
        pipeline.gateway.mail_fee_instrument.assert_not_called()
        pipeline.store.delete.assert_called_once()
        pipeline.ledger.publish.assert_not_called()

    def test_invalid_request_fails_before_io(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)

        with pytest.raises(InvalidRequestError):
            pipeline.processor.process(make_request(file_bytes, email=""))

        pipeline.store.fetch_bytes.assert_not_called()
        pipeline.store.delete.assert_not_called()

    def test_unknown_jurisdiction_fails_before_io(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        request = replace(make_request(file_bytes), jurisdiction_code="ZZ")

        with pytest.raises(UnknownJurisdictionError):
            pipeline.processor.process(request)

        pipeline.store.fetch_bytes.assert_not_called()
        pipeline.store.delete.assert_not_called()

    def test_out_of_order_steps_rejected(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        processor = Processor(
            preflight_steps=[LoadConfigStep()],
            steps=[VerifyFileStep(TamperVerifier())],
            recovery=ErrorRecoveryStep(pipeline.store),
        )

        with pytest.raises(PipelineStateError, match="VerifyFileStep"):
            processor.process(make_request(file_bytes))

    def test_incomplete_pipeline_rejected(self) -> None:
        file_bytes = _fake_jpeg()
        pipeline = _Pipeline(file_bytes)
        processor = Processor(
            preflight_steps=[LoadConfigStep()],
            steps=[FetchFileStep(pipeline.store)],
            recovery=ErrorRecoveryStep(pipeline.store),
        )

        with pytest.raises(PipelineStateError, match="file_fetched"):
            processor.process(make_request(file_bytes))
