from abc import ABC, abstractmethod


class BaseEmailSender(ABC):
    """Contract for transactional email providers."""

    @abstractmethod
    def send(self, to: str, subject: str, html: str, text: str) -> None:
        """Send one message with HTML and plain-text bodies.

        Raises:
            NotificationError: if the provider rejects or cannot take the message.
        """
