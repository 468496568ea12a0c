from proofly.config.settings import Settings
from proofly.notification.base import BaseEmailSender
from proofly.notification.confirmation import ConfirmationNotifier
from proofly.notification.disabled_adapter import DisabledEmailSender
from proofly.notification.postmark_adapter import PostmarkEmailSender


class NotifierFactory:
    """Creates the confirmation notifier over the configured email provider."""

    PROVIDERS = ("postmark", "disabled")

    @classmethod
    def create(cls, settings: Settings) -> ConfirmationNotifier:
        return ConfirmationNotifier(
            sender=cls._create_sender(settings),
            explorer_url=settings.attestation_explorer_url,
            support_email=settings.support_email,
        )

    @classmethod
    def _create_sender(cls, settings: Settings) -> BaseEmailSender:
        provider = settings.email_provider.lower()
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown email provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        if provider == "disabled" or not settings.postmark_server_token:
            return DisabledEmailSender()
        return PostmarkEmailSender(
            server_token=settings.postmark_server_token,
            from_email=settings.from_email,
        )
