class UnknownJurisdictionError(ValueError):
    """Raised when a jurisdiction code has no configuration."""
