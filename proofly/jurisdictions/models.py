from dataclasses import dataclass, field


@dataclass(frozen=True)
class MailingAddress:
    """Postal address of the receiving agency."""

    name: str
    street: str
    city: str
    state: str
    zip: str


@dataclass(frozen=True)
class AgencyInfo:
    agency_name: str
    mailing_address: MailingAddress
    phone: str
    processing_time_days: int


@dataclass(frozen=True)
class FeeSchedule:
    """Fees in cents."""

    first_copy: int
    additional_copy: int
    service_fee: int
    postage: int
    check_memo: str  # payee written on the fee check

    def agency_fee_cents(self, copies: int) -> int:
        """Fee owed to the agency for ``copies`` certified copies."""
        return self.first_copy + max(0, copies - 1) * self.additional_copy


@dataclass(frozen=True)
class FormTemplate:
    """Blank official application and its AcroForm field names."""

    pdf_filename: str
    field_map: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RequiredDocument:
    id: str
    label: str
    description: str
    required: bool
    accepted_types: tuple[str, ...]
    max_size_mb: int


@dataclass(frozen=True)
class Eligibility:
    who_can_request: tuple[str, ...]
    relationship_proof_required: bool
    notarized_required: bool


@dataclass(frozen=True)
class JurisdictionConfig:
    """Per-jurisdiction configuration: agency, fees, form and eligibility."""

    code: str
    name: str
    status: str  # "live" | "coming_soon"
    vital_records: AgencyInfo
    fees: FeeSchedule
    form: FormTemplate
    required_docs: tuple[RequiredDocument, ...]
    eligibility: Eligibility
