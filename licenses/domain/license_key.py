"""
LicenseKey domain entity.

This is the core domain entity representing a single-use license key.
It contains business logic and is independent of infrastructure.
"""

import re
import secrets
import string
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import Email

KEY_GROUPS = 4
KEY_GROUP_LENGTH = 4
KEY_ALPHABET = string.ascii_uppercase + string.digits


def generate_license_key(prefix: str) -> str:
    """
    Generate a license key in format: PREFIX-XXXX-XXXX-XXXX-XXXX.

    Args:
        prefix: Key prefix (e.g., 'PCLN')

    Returns:
        Generated license key string
    """
    parts = [
        "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_GROUP_LENGTH))
        for _ in range(KEY_GROUPS)
    ]
    return f"{prefix}-{'-'.join(parts)}"


def key_pattern(prefix: str) -> "re.Pattern[str]":
    """Return the compiled pattern a well-formed key with ``prefix`` matches."""
    group = f"[A-Z0-9]{{{KEY_GROUP_LENGTH}}}"
    return re.compile(
        rf"{re.escape(prefix)}(?:-{group}){{{KEY_GROUPS}}}"
    )


def is_well_formed(key: str, prefix: str) -> bool:
    """Check whether ``key`` follows the canonical format for ``prefix``."""
    if not isinstance(key, str):
        return False
    return key_pattern(prefix).fullmatch(key) is not None


@dataclass(frozen=True)
class LicenseKey:
    """
    LicenseKey domain entity.

    A key is issued once per sale and can be redeemed exactly once.
    This is an immutable value object with business logic.
    """

    id: uuid.UUID
    key: str
    email: Email
    sale_id: str
    is_used: bool
    activated_at: Optional[datetime]
    created_at: datetime

    def __post_init__(self):
        """Validate license key entity."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.key) > 64:
            raise ValueError("License key too long")
        if not self.sale_id or len(self.sale_id.strip()) == 0:
            raise ValueError("Sale ID is required")
        if len(self.sale_id) > 128:
            raise ValueError("Sale ID too long")
        if self.is_used != (self.activated_at is not None):
            raise ValueError("activated_at must be set if and only if the key is used")

    @classmethod
    def create(
        cls,
        prefix: str,
        email: str,
        sale_id: str,
        license_key_id: Optional[uuid.UUID] = None,
    ) -> "LicenseKey":
        """
        Create a new, unused LicenseKey entity.

        Args:
            prefix: Prefix for key generation
            email: Purchaser email address
            sale_id: Payment provider sale identifier
            license_key_id: Optional UUID (generated if not provided)

        Returns:
            LicenseKey entity instance
        """
        return cls(
            id=license_key_id or uuid.uuid4(),
            key=generate_license_key(prefix),
            email=Email(email),
            sale_id=str(sale_id).strip(),
            is_used=False,
            activated_at=None,
            created_at=datetime.now(timezone.utc),
        )

    def redeem(self, at: Optional[datetime] = None) -> "LicenseKey":
        """
        Return the redeemed version of this key.

        Raises:
            ValueError: If the key has already been redeemed
        """
        if self.is_used:
            raise ValueError("License key has already been redeemed")
        return replace(
            self, is_used=True, activated_at=at or datetime.now(timezone.utc)
        )

    def with_new_key(self, prefix: str) -> "LicenseKey":
        """Return a copy carrying a freshly generated key string."""
        return replace(self, key=generate_license_key(prefix))
