from dataclasses import dataclass, fields

from proofly.attestation.models import AttestationUIDSet
from proofly.mailing.models import Address
from proofly.processor.exceptions import InvalidRequestError


@dataclass(frozen=True)
class ApplicantData:
    """Structured applicant record collected by the wizard."""

    full_name: str
    date_of_birth: str  # YYYY-MM-DD
    place_of_birth: str
    relationship: str
    purpose: str
    mailing_address1: str
    city: str
    state: str
    zip: str
    email: str
    mother_name_at_birth: str = ""
    father_name: str = ""
    purpose_other: str = ""
    mailing_address2: str = ""

    REQUIRED = (
        "full_name",
        "date_of_birth",
        "place_of_birth",
        "relationship",
        "purpose",
        "mailing_address1",
        "city",
        "state",
        "zip",
        "email",
    )

    @property
    def street(self) -> str:
        if self.mailing_address2:
            return f"{self.mailing_address1} {self.mailing_address2}"
        return self.mailing_address1

    def sender_address(self) -> Address:
        """Return-address block used on both mail pieces."""
        return Address(
            name=self.full_name,
            street=self.street,
            city=self.city,
            state=self.state,
            zip=self.zip,
        )

    def missing_fields(self) -> list[str]:
        return [name for name in self.REQUIRED if not str(getattr(self, name)).strip()]


@dataclass(frozen=True)
class FulfillmentRequest:
    """Immutable pipeline input built from payment metadata.

    Lives only in process memory for the duration of one run.
    """

    session_id: str
    jurisdiction_code: str
    copies: int
    storage_ref: str
    committed_fingerprint: str
    signature_image: str  # data URL, e.g. "data:image/png;base64,..."
    applicant: ApplicantData

    def validate(self) -> None:
        """Raise InvalidRequestError when required fields are absent.

        Runs before any I/O, so a failure here never needs cleanup.
        """
        missing = [
            f.name
            for f in fields(self)
            if f.name not in ("copies", "applicant") and not str(getattr(self, f.name)).strip()
        ]
        missing.extend(f"applicant.{name}" for name in self.applicant.missing_fields())
        if missing:
            raise InvalidRequestError(f"Fulfillment request missing fields: {missing}")
        if self.copies < 1:
            raise InvalidRequestError(f"copies must be at least 1, got {self.copies}")


@dataclass(frozen=True)
class FulfillmentResult:
    """Terminal success value of one pipeline run."""

    request_ref: str
    mail_id: str
    fee_id: str
    fee_status: str
    tracking_number: str | None
    expected_delivery_date: str | None
    mailed_at: str  # ISO-8601 UTC
    deletion_receipt_hash: str
    all_files_deleted: bool
    attestation_uids: AttestationUIDSet

    def to_cache_entry(self) -> dict[str, object]:
        """Payload served to the polling confirmation page."""
        return {
            "requestRef": self.request_ref,
            "trackingNumber": self.tracking_number,
            "mailedAt": self.mailed_at,
            "deletionReceiptHash": self.deletion_receipt_hash,
            "attestationUIDs": self.attestation_uids.as_dict(),
        }
