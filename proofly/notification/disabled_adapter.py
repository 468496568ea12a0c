from proofly.notification.base import BaseEmailSender
from proofly.notification.exceptions import NotificationError


class DisabledEmailSender(BaseEmailSender):
    """Used when no email provider credentials are configured."""

    def send(self, to: str, subject: str, html: str, text: str) -> None:
        _ = to, html, text
        raise NotificationError(f"Email provider not configured, cannot send '{subject}'")
