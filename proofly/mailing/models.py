from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    name: str
    street: str
    city: str
    state: str
    zip: str
    country: str = "US"


@dataclass(frozen=True)
class MailReceipt:
    """Result of mailing the packet."""

    mail_id: str
    tracking_number: str | None = None
    expected_delivery_date: str | None = None


@dataclass(frozen=True)
class FeeReceipt:
    """Result of mailing the fee check.

    ``status`` is "created" when a check was issued and "stubbed" when the
    sending account has no bank account configured.
    """

    check_id: str
    status: str
    check_number: int | None = None

    @property
    def stubbed(self) -> bool:
        return self.status == "stubbed"
