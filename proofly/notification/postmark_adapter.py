from postmarker.core import PostmarkClient

from proofly.notification.base import BaseEmailSender
from proofly.notification.exceptions import NotificationError


class PostmarkEmailSender(BaseEmailSender):
    """Sends transactional email through Postmark."""

    def __init__(
        self,
        server_token: str,
        from_email: str,
        message_stream: str = "outbound",
        client: PostmarkClient | None = None,
    ) -> None:
        self._client = client or PostmarkClient(server_token=server_token)
        self._from_email = from_email
        self._message_stream = message_stream

    def send(self, to: str, subject: str, html: str, text: str) -> None:
        try:
            self._client.emails.send(
                From=self._from_email,
                To=to,
                Subject=subject,
                HtmlBody=html,
                TextBody=text,
                MessageStream=self._message_stream,
            )
        except Exception as exc:
            raise NotificationError(f"Postmark rejected message: {exc}") from exc
