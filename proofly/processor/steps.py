from collections.abc import Callable
from datetime import datetime, timezone

from proofly.attestation.emitter import AttestationEmitter
from proofly.attestation.models import AuthorizationClaim, FulfillmentClaim
from proofly.cache.result_cache import FulfillmentResultCache
from proofly.deletion.engine import DeletionEngine
from proofly.deletion.models import DeletionCorrelation, TransientBuffer
from proofly.integrity.fingerprint import content_fingerprint
from proofly.integrity.verifier import TamperVerifier
from proofly.jurisdictions.registry import JurisdictionRegistry
from proofly.logging.logger import Log
from proofly.mailing.base import BaseMailingGateway
from proofly.mailing.models import Address
from proofly.notification.confirmation import ConfirmationNotifier
from proofly.pdf.base import BaseFormFiller, BaseLetterGenerator, BasePacketBuilder
from proofly.processor.exceptions import TamperDetectedError
from proofly.processor.models import FulfillmentResult
from proofly.processor.pipeline import FulfillmentState, PipelineContext, PipelineStep
from proofly.storage.base import BaseBlobStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require(value: object, name: str) -> None:
    if value is None:
        raise ValueError(f"PipelineContext.{name} must be set before this step")


class LoadConfigStep(PipelineStep):
    target_state = FulfillmentState.CONFIG_LOADED

    def run(self, context: PipelineContext) -> PipelineContext:
        config = JurisdictionRegistry.get(context.request.jurisdiction_code)
        Log.info(f"Loaded {config.code} configuration for {context.request_ref}")
        return context.advance(self.target_state, jurisdiction=config)


class FetchFileStep(PipelineStep):
    target_state = FulfillmentState.FILE_FETCHED

    def __init__(self, store: BaseBlobStore) -> None:
        self._store = store

    def run(self, context: PipelineContext) -> PipelineContext:
        fetched = self._store.fetch_bytes(context.request.storage_ref)
        Log.info(
            f"Fetched {len(fetched.data)} bytes ({fetched.content_type}) for {context.request_ref}"
        )
        return context.advance(
            self.target_state,
            id_file=TransientBuffer("photoId", fetched.data),
            id_content_type=fetched.content_type,
        )


class VerifyFileStep(PipelineStep):
    target_state = FulfillmentState.VERIFIED

    def __init__(self, verifier: TamperVerifier) -> None:
        self._verifier = verifier

    def run(self, context: PipelineContext) -> PipelineContext:
        _require(context.id_file, "id_file")
        if not self._verifier.verify(context.id_file.data, context.request.committed_fingerprint):
            raise TamperDetectedError(
                f"Uploaded file for {context.request_ref} does not match its committed fingerprint"
            )
        return context.advance(self.target_state)


class FillFormStep(PipelineStep):
    target_state = FulfillmentState.FORM_FILLED

    def __init__(
        self,
        filler: BaseFormFiller,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._filler = filler
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        request = context.request
        form = self._filler.fill(
            context.require_jurisdiction(),
            request.applicant,
            request.signature_image,
            request.copies,
            self._clock().date(),
        )
        Log.info(f"Filled official form ({len(form)} bytes) for {context.request_ref}")
        return context.advance(self.target_state, filled_form=TransientBuffer("filledForm", form))


class GenerateLetterStep(PipelineStep):
    target_state = FulfillmentState.LETTER_GENERATED

    def __init__(
        self,
        generator: BaseLetterGenerator,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._generator = generator
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        letter = self._generator.generate(
            context.require_jurisdiction(),
            context.request.applicant,
            context.request.signature_image,
            context.request_ref,
            self._clock().date(),
        )
        Log.info(f"Generated consent letter ({len(letter)} bytes) for {context.request_ref}")
        return context.advance(
            self.target_state, consent_letter=TransientBuffer("consentLetter", letter)
        )


class BuildPacketStep(PipelineStep):
    target_state = FulfillmentState.PACKET_BUILT

    def __init__(self, builder: BasePacketBuilder) -> None:
        self._builder = builder

    def run(self, context: PipelineContext) -> PipelineContext:
        _require(context.filled_form, "filled_form")
        _require(context.consent_letter, "consent_letter")
        _require(context.id_file, "id_file")
        packet = self._builder.build(
            context.filled_form.data,
            context.consent_letter.data,
            context.id_file.data,
            context.id_content_type,
        )
        return context.advance(self.target_state, packet=TransientBuffer("packet", packet))


class MailPacketStep(PipelineStep):
    target_state = FulfillmentState.MAILED

    def __init__(
        self,
        gateway: BaseMailingGateway,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._gateway = gateway
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        _require(context.packet, "packet")
        config = context.require_jurisdiction()
        agency = config.vital_records.mailing_address
        destination = Address(
            name=agency.name,
            street=agency.street,
            city=agency.city,
            state=agency.state,
            zip=agency.zip,
        )
        receipt = self._gateway.mail_packet(
            packet=context.packet.to_bytes(),
            destination=destination,
            sender=context.request.applicant.sender_address(),
            request_ref=context.request_ref,
            description=f"{config.name} Birth Certificate Request - {context.request_ref}",
        )
        Log.info(f"Mailed packet {receipt.mail_id} for {context.request_ref}")
        return context.advance(self.target_state, mail=receipt, mailed_at=self._clock())


class MailFeeStep(PipelineStep):
    target_state = FulfillmentState.FEE_PAID

    def __init__(self, gateway: BaseMailingGateway) -> None:
        self._gateway = gateway

    def run(self, context: PipelineContext) -> PipelineContext:
        fee = self._gateway.mail_fee_instrument(
            config=context.require_jurisdiction(),
            copies=context.request.copies,
            sender=context.request.applicant.sender_address(),
            request_ref=context.request_ref,
        )
        Log.info(f"Fee instrument {fee.check_id} ({fee.status}) for {context.request_ref}")
        return context.advance(self.target_state, fee=fee)


class DeleteStep(PipelineStep):
    target_state = FulfillmentState.DELETED

    def __init__(self, engine: DeletionEngine) -> None:
        self._engine = engine

    def run(self, context: PipelineContext) -> PipelineContext:
        _require(context.mail, "mail")
        _require(context.fee, "fee")
        receipted = [context.id_file, context.filled_form, context.consent_letter]
        receipt = self._engine.run(
            persistent_ref=context.request.storage_ref,
            buffers=[b for b in receipted if b is not None],
            correlation=DeletionCorrelation(
                request_ref=context.request_ref,
                mail_id=context.mail.mail_id,
                fee_id=context.fee.check_id,
            ),
            scratch=[context.packet] if context.packet is not None else [],
        )
        return context.advance(self.target_state, deletion_receipt=receipt)


class AttestStep(PipelineStep):
    target_state = FulfillmentState.ATTESTED

    def __init__(self, emitter: AttestationEmitter, request_type: str) -> None:
        self._emitter = emitter
        self._request_type = request_type

    def run(self, context: PipelineContext) -> PipelineContext:
        _require(context.deletion_receipt, "deletion_receipt")
        _require(context.mail, "mail")
        _require(context.fee, "fee")
        _require(context.mailed_at, "mailed_at")
        config = context.require_jurisdiction()
        request = context.request

        authorization = AuthorizationClaim(
            jurisdiction_code=config.code,
            request_type=self._request_type,
            signature_digest=content_fingerprint(request.signature_image.encode("utf-8")),
            authorized_at=context.started_at,
        )
        fulfillment = FulfillmentClaim(
            jurisdiction_code=config.code,
            request_type=self._request_type,
            mail_id=context.mail.mail_id,
            tracking_number=context.mail.tracking_number,
            mailed_to_name=config.vital_records.mailing_address.name,
            mailed_at=context.mailed_at,
            request_ref=context.request_ref,
        )
        uids = self._emitter.emit(authorization, fulfillment, context.deletion_receipt)

        result = FulfillmentResult(
            request_ref=context.request_ref,
            mail_id=context.mail.mail_id,
            fee_id=context.fee.check_id,
            fee_status=context.fee.status,
            tracking_number=context.mail.tracking_number,
            expected_delivery_date=context.mail.expected_delivery_date,
            mailed_at=context.mailed_at.isoformat(),
            deletion_receipt_hash=context.deletion_receipt.receipt_hash,
            all_files_deleted=context.deletion_receipt.all_files_deleted,
            attestation_uids=uids,
        )
        return context.advance(self.target_state, attestations=uids, result=result)


class NotifyStep(PipelineStep):
    target_state = FulfillmentState.NOTIFIED

    def __init__(self, notifier: ConfirmationNotifier) -> None:
        self._notifier = notifier

    def run(self, context: PipelineContext) -> PipelineContext:
        _require(context.result, "result")
        _require(context.deletion_receipt, "deletion_receipt")
        outcome = self._notifier.notify(
            context.request.applicant,
            context.require_jurisdiction(),
            context.result,
            context.deletion_receipt,
        )
        if not outcome.ok:
            Log.warning(f"Continuing without confirmation email for {context.request_ref}")
        return context.advance(self.target_state, notified=outcome.ok)


class PublishResultStep(PipelineStep):
    target_state = FulfillmentState.DONE

    def __init__(self, cache: FulfillmentResultCache) -> None:
        self._cache = cache

    def run(self, context: PipelineContext) -> PipelineContext:
        _require(context.result, "result")
        self._cache.store(context.request.session_id, context.result)
        Log.info(f"Fulfillment {context.request_ref} complete")
        return context.advance(self.target_state)


class ErrorRecoveryStep:
    """Best-effort cleanup after a fatal error.

    Zeroes whatever buffers exist and deletes the stored upload unless the
    deletion step already ran. Never raises; the caller re-raises the
    original error.
    """

    def __init__(self, store: BaseBlobStore) -> None:
        self._store = store

    def run(self, context: PipelineContext, error: BaseException) -> PipelineContext:
        ref = context.request_ref
        Log.error(f"Fulfillment {ref} failed after state '{context.state.value}': {error}")

        for buffer in context.buffers():
            if not buffer.zeroize():
                Log.warning(f"Could not overwrite buffer '{buffer.label}' during recovery for {ref}")

        if context.deletion_receipt is None:
            try:
                deleted = self._store.delete(context.request.storage_ref)
            except Exception as exc:
                Log.error(f"Recovery delete raised for {ref}: {exc}")
                deleted = False
            if deleted:
                Log.info(f"Stored upload deleted during recovery for {ref}")
            else:
                Log.error(f"Stored upload could not be deleted during recovery for {ref}")

        return context.advance(FulfillmentState.ERROR_RECOVERY)
