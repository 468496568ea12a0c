from proofly.jurisdictions.colorado import COLORADO
from proofly.mailing.example_adapter import ExampleMailingGateway
from proofly.mailing.models import Address

SENDER = Address(name="Jane Q Public", street="123 Main St", city="Boulder", state="CO", zip="80302")
AGENCY = Address(
    name="Vital Records Section, CDPHE", street="4300 Cherry Creek Dr S", city="Denver",
    state="CO", zip="80246",
)


class TestExampleMailingGateway:
    def test_mail_packet_returns_deterministic_id(self) -> None:
        gateway = ExampleMailingGateway()

        receipt = gateway.mail_packet(
            packet=b"%PDF-1.7",
            destination=AGENCY,
            sender=SENDER,
            request_ref="PRF-2026-AB2C",
            description="Colorado Birth Certificate Request - PRF-2026-AB2C",
        )

        assert receipt.mail_id == "ltr_example_PRF-2026-AB2C"
        assert receipt.tracking_number is None

    def test_fee_instrument_is_stubbed(self) -> None:
        gateway = ExampleMailingGateway()

        fee = gateway.mail_fee_instrument(
            config=COLORADO, copies=2, sender=SENDER, request_ref="PRF-2026-AB2C"
        )

        assert fee.check_id == "STUB_PRF-2026-AB2C"
        assert fee.stubbed is True
