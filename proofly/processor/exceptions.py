class ProcessorError(Exception):
    """Base exception for all fulfillment pipeline errors."""


class InvalidRequestError(ProcessorError):
    """Raised when a fulfillment request is missing required fields."""


class TamperDetectedError(ProcessorError):
    """Raised when fetched content does not match its committed fingerprint."""


class PipelineStateError(ProcessorError):
    """Raised when a step produces an out-of-order state transition."""
