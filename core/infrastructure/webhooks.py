"""
Inbound webhook signature verification.

Purchase notifications are signed with an HMAC-SHA256 hex digest of the
raw request body, keyed with a secret shared with the payment provider.
"""
import hashlib
import hmac
import logging
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from core.domain.exceptions import WebhookSignatureError

logger = logging.getLogger(__name__)


class WebhookSignatureVerifier:
    """Verifies signatures of inbound purchase webhooks."""

    def __init__(self, secret: Optional[str] = None, require_signature: Optional[bool] = None):
        """
        Initialize the verifier.

        Args:
            secret: Shared secret (defaults to LICENSE_WEBHOOK_SECRET)
            require_signature: Reject unsigned requests
                (defaults to LICENSE_WEBHOOK_REQUIRE_SIGNATURE)
        """
        self.secret = settings.LICENSE_WEBHOOK_SECRET if secret is None else secret
        self.require_signature = (
            settings.LICENSE_WEBHOOK_REQUIRE_SIGNATURE
            if require_signature is None
            else require_signature
        )

    @staticmethod
    def generate_signature(payload: bytes, secret: str) -> str:
        """
        Generate HMAC signature for webhook payload.

        Args:
            payload: Raw request body
            secret: Webhook secret

        Returns:
            HMAC SHA-256 signature (hex)
        """
        if isinstance(payload, str):
            payload = payload.encode()
        return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()

    @classmethod
    def signatures_match(cls, payload: bytes, signature: str, secret: str) -> bool:
        """
        Compare a received signature with the expected one in constant time.

        Args:
            payload: Raw request body
            signature: Signature sent by the caller
            secret: Webhook secret

        Returns:
            True if signature is valid
        """
        expected_signature = cls.generate_signature(payload, secret).encode("ascii")
        received = signature.strip().lower().encode("utf-8", errors="replace")
        return hmac.compare_digest(expected_signature, received)

    def verify(self, payload: bytes, signature: Optional[str]) -> None:
        """
        Verify a webhook request.

        Args:
            payload: Raw request body
            signature: Value of the signature header, if any

        Raises:
            ImproperlyConfigured: If signatures are required but no secret is set
            WebhookSignatureError: If the signature is missing or wrong
        """
        if not self.require_signature:
            if self.secret and signature:
                if not self.signatures_match(payload, signature, self.secret):
                    raise WebhookSignatureError()
            return

        if not self.secret:
            logger.error("LICENSE_WEBHOOK_SECRET is not configured")
            raise ImproperlyConfigured("LICENSE_WEBHOOK_SECRET is not configured")

        if not signature:
            logger.warning("Purchase webhook received without signature")
            raise WebhookSignatureError("Missing webhook signature")

        if not self.signatures_match(payload, signature, self.secret):
            logger.warning("Purchase webhook received with invalid signature")
            raise WebhookSignatureError()
