from proofly.attestation.base import BaseLedgerClient
from proofly.attestation.models import AttestationRecord
from proofly.logging.logger import Log


class DisabledLedgerClient(BaseLedgerClient):
    """Publishes nothing. Used when no signer key or schemas are configured."""

    def publish(self, schema_id: str, record: AttestationRecord, revocable: bool) -> str | None:
        _ = schema_id, revocable
        Log.warning(f"Ledger not configured, skipping {record.kind} attestation")
        return None
