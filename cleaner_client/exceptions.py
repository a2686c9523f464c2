"""
Client exceptions.
"""


class ClientError(Exception):
    """Base exception for all client errors."""


class UsageLimitReached(ClientError):
    """Raised locally when the free tier daily limit is used up."""

    def __init__(self, limit: int):
        super().__init__(
            f"Daily limit of {limit} prompts reached. Upgrade to Pro for unlimited usage!"
        )
        self.limit = limit


class InvalidLicenseKey(ClientError):
    """Raised when the service refuses to redeem a license key."""

    def __init__(self):
        super().__init__("Invalid license key")


class ServiceError(ClientError):
    """
    Raised when the service answers with an error or cannot be reached.

    ``retryable`` mirrors the flag in the service's error envelope.
    """

    def __init__(self, message: str, status_code: int = 0, code: str = "", retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.retryable = retryable
