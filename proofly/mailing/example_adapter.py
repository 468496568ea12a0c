"""Example mailing adapter.

No network calls. Useful for local development and dry runs: every mail
piece is reported as stubbed with deterministic identifiers.
"""

from proofly.jurisdictions.models import JurisdictionConfig
from proofly.logging.logger import Log
from proofly.mailing.base import BaseMailingGateway
from proofly.mailing.models import Address, FeeReceipt, MailReceipt


class ExampleMailingGateway(BaseMailingGateway):
    def mail_packet(
        self,
        packet: bytes,
        destination: Address,
        sender: Address,
        request_ref: str,
        description: str,
    ) -> MailReceipt:
        _ = sender, description
        Log.info(f"[example] would mail {len(packet)} byte packet to {destination.name}")
        return MailReceipt(mail_id=f"ltr_example_{request_ref}")

    def mail_fee_instrument(
        self,
        config: JurisdictionConfig,
        copies: int,
        sender: Address,
        request_ref: str,
    ) -> FeeReceipt:
        _ = sender
        Log.info(
            f"[example] would mail {config.fees.agency_fee_cents(copies)} cent check "
            f"for {request_ref}"
        )
        return FeeReceipt(check_id=f"STUB_{request_ref}", status="stubbed")
