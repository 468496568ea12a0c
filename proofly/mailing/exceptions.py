class MailingError(Exception):
    """Raised when a mail piece cannot be submitted."""
