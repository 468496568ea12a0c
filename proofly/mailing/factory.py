from proofly.config.settings import Settings
from proofly.mailing.base import BaseMailingGateway
from proofly.mailing.example_adapter import ExampleMailingGateway
from proofly.mailing.lob_adapter import LobMailingGateway


class MailingGatewayFactory:
    """Creates the configured mailing adapter."""

    PROVIDERS = ("lob", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseMailingGateway:
        provider = settings.mailing_provider.lower()
        if provider == "example":
            return ExampleMailingGateway()
        if provider == "lob":
            if not settings.lob_api_key:
                raise ValueError("lob_api_key is required for mailing_provider=lob")
            return LobMailingGateway(
                api_url=settings.lob_api_url,
                api_key=settings.lob_api_key,
                bank_account_id=settings.lob_bank_account_id,
                timeout_seconds=settings.mailing_timeout_seconds,
            )
        raise ValueError(
            f"Unknown mailing provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
