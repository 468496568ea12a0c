class DocumentError(Exception):
    """Base exception for document composition."""


class FormFillError(DocumentError):
    """Raised when the official form template cannot be loaded or written."""


class ConsentLetterError(DocumentError):
    """Raised when the consent letter cannot be rendered."""


class PacketBuildError(DocumentError):
    """Raised when an input is not a well-formed document of its claimed type."""
