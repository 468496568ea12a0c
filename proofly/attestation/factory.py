from web3 import Web3

from proofly.attestation.base import BaseLedgerClient
from proofly.attestation.disabled_adapter import DisabledLedgerClient
from proofly.attestation.eas_adapter import EasLedgerClient
from proofly.attestation.emitter import AttestationEmitter, AttestationSchemas
from proofly.config.settings import Settings


class AttestationEmitterFactory:
    """Creates an emitter backed by the configured ledger adapter."""

    PROVIDERS = ("eas", "disabled")

    @classmethod
    def create(cls, settings: Settings) -> AttestationEmitter:
        schemas = AttestationSchemas(
            authorization=settings.attestation_schema_authorization,
            fulfillment=settings.attestation_schema_fulfillment,
            deletion=settings.attestation_schema_deletion,
        )
        return AttestationEmitter(ledger=cls._create_ledger(settings), schemas=schemas)

    @classmethod
    def _create_ledger(cls, settings: Settings) -> BaseLedgerClient:
        provider = settings.attestation_provider.lower()
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown attestation provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        if provider == "disabled" or not settings.attestation_signer_private_key:
            return DisabledLedgerClient()
        web3 = Web3(Web3.HTTPProvider(settings.attestation_rpc_url))
        return EasLedgerClient(
            web3=web3,
            contract_address=settings.attestation_contract_address,
            private_key=settings.attestation_signer_private_key,
            receipt_timeout_seconds=settings.attestation_receipt_timeout_seconds,
        )
