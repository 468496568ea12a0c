class NotificationError(Exception):
    """Raised when an email cannot be handed to the provider."""
