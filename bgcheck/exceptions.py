"""Custom exception hierarchy for bgcheck."""


class BgcheckError(Exception):
    """Base exception for all bgcheck errors."""


class InvalidAccountIdError(BgcheckError):
    """Account ID is missing or not a positive integer."""


class UpstreamError(BgcheckError):
    """Primary upstream lookup failed."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code


class ProfileNotFoundError(UpstreamError):
    """Account does not exist on the platform."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ConfigError(BgcheckError):
    """Invalid configuration."""
