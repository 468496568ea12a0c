from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AttestationUIDSet:
    """Identifiers of the three published records; None where publishing failed."""

    authorization: str | None = None
    fulfillment: str | None = None
    deletion: str | None = None

    def as_dict(self) -> dict[str, str | None]:
        return {
            "authorization": self.authorization,
            "fulfillment": self.fulfillment,
            "deletion": self.deletion,
        }

    @property
    def published_count(self) -> int:
        return sum(uid is not None for uid in self.as_dict().values())


@dataclass(frozen=True)
class AuthorizationClaim:
    jurisdiction_code: str
    request_type: str
    signature_digest: str  # hex sha256 of the signature artifact
    authorized_at: datetime
    agent_authorized: bool = True


@dataclass(frozen=True)
class FulfillmentClaim:
    jurisdiction_code: str
    request_type: str
    mail_id: str
    tracking_number: str | None
    mailed_to_name: str
    mailed_at: datetime
    request_ref: str


@dataclass(frozen=True)
class SchemaField:
    """One typed field of a ledger record, e.g. ("requestRef", "string", "PRF-...")."""

    name: str
    abi_type: str
    value: object


@dataclass(frozen=True)
class AttestationRecord:
    """A schema-typed record ready to publish."""

    kind: str  # "authorization" | "fulfillment" | "deletion"
    fields: tuple[SchemaField, ...]
    revocable: bool

    @property
    def schema_definition(self) -> str:
        return ",".join(f"{f.abi_type} {f.name}" for f in self.fields)
