from abc import ABC, abstractmethod

from proofly.attestation.models import AttestationRecord


class BaseLedgerClient(ABC):
    """Contract for public append-only ledger adapters."""

    @abstractmethod
    def publish(self, schema_id: str, record: AttestationRecord, revocable: bool) -> str | None:
        """Publish one record signed by the service key.

        Returns:
            The record identifier read from confirmed ledger output, the raw
            transaction reference when no identifier could be parsed, or None
            when the adapter publishes nothing.

        Raises:
            LedgerError: if submission or confirmation fails.
        """
