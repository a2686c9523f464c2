"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    retryable = False

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when no license key is associated with a lookup."""

    def __init__(self, message: str = "License not found. Double-check your email."):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class InvalidLicenseKeyError(LicenseException):
    """
    Raised when a license key cannot be redeemed.

    Covers unknown, already used and malformed keys alike so that
    callers probing the keyspace learn nothing about which case applied.
    """

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_LICENSE_KEY")


class LicenseIssuanceError(LicenseException):
    """Raised when a unique license key could not be generated."""

    retryable = True

    def __init__(self, message: str = "Could not issue a license key, please retry"):
        super().__init__(message, code="LICENSE_ISSUANCE_FAILED")


class PurchaseException(DomainException):
    """Base exception for purchase webhook errors."""

    pass


class WebhookSignatureError(PurchaseException):
    """Raised when a purchase webhook signature is missing or wrong."""

    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class InvalidPurchaseError(PurchaseException):
    """Raised when a purchase notification lacks required fields."""

    def __init__(self, message: str = "Invalid purchase payload"):
        super().__init__(message, code="INVALID_PURCHASE")


class UnknownProductError(PurchaseException):
    """Raised when a purchase is for a product this service does not sell."""

    def __init__(self, message: str = "Invalid product"):
        super().__init__(message, code="INVALID_PRODUCT")


class PromptException(DomainException):
    """Base exception for prompt cleaning errors."""

    pass


class InvalidPromptError(PromptException):
    """Raised when the submitted prompt is missing or too long."""

    def __init__(self, message: str = "Invalid prompt provided"):
        super().__init__(message, code="INVALID_PROMPT")


class UpstreamError(PromptException):
    """
    Base exception for failures of the external LLM API.

    ``detail`` carries the raw upstream information for server-side
    logging and is never sent to callers outside debug mode.
    """

    def __init__(self, message: str, code: str, detail: str = ""):
        super().__init__(message, code=code)
        self.detail = detail


class UpstreamRateLimitedError(UpstreamError):
    """Raised when the LLM API rejects the call for rate limiting."""

    retryable = True

    def __init__(
        self,
        message: str = "Service temporarily busy. Please try again in a moment.",
        detail: str = "",
    ):
        super().__init__(message, code="UPSTREAM_RATE_LIMITED", detail=detail)


class UpstreamUnavailableError(UpstreamError):
    """Raised when the LLM API cannot be reached or has no quota left."""

    retryable = True

    def __init__(
        self,
        message: str = "Service temporarily unavailable. Please try again later.",
        detail: str = "",
    ):
        super().__init__(message, code="UPSTREAM_UNAVAILABLE", detail=detail)


class UpstreamTimeoutError(UpstreamError):
    """Raised when the LLM API does not answer within the request timeout."""

    retryable = True

    def __init__(
        self,
        message: str = "The AI service took too long to respond. Please try again.",
        detail: str = "",
    ):
        super().__init__(message, code="UPSTREAM_TIMEOUT", detail=detail)


class UpstreamResponseError(UpstreamError):
    """Raised when the LLM API answers with an error or an unusable body."""

    def __init__(
        self,
        message: str = "AI service error. Please try again.",
        detail: str = "",
    ):
        super().__init__(message, code="UPSTREAM_ERROR", detail=detail)


class LicenseKeyCollisionError(LicenseException):
    """Raised by storage when a generated key string is already taken."""

    def __init__(self, message: str = "License key already exists"):
        super().__init__(message, code="LICENSE_KEY_COLLISION")


class DuplicateSaleError(LicenseException):
    """Raised by storage when a key was already issued for the sale."""

    def __init__(self, message: str = "A license key was already issued for this sale"):
        super().__init__(message, code="DUPLICATE_SALE")
