from abc import ABC, abstractmethod

from proofly.jurisdictions.models import JurisdictionConfig
from proofly.mailing.models import Address, FeeReceipt, MailReceipt


class BaseMailingGateway(ABC):
    """Contract for physical mail adapters."""

    @abstractmethod
    def mail_packet(
        self,
        packet: bytes,
        destination: Address,
        sender: Address,
        request_ref: str,
        description: str,
    ) -> MailReceipt:
        """Print and mail the packet PDF to ``destination``.

        Raises:
            MailingError: on any submission failure.
        """

    @abstractmethod
    def mail_fee_instrument(
        self,
        config: JurisdictionConfig,
        copies: int,
        sender: Address,
        request_ref: str,
    ) -> FeeReceipt:
        """Mail a check for the agency fee.

        Returns a "stubbed" receipt when no bank account is configured.

        Raises:
            MailingError: on any submission failure.
        """
