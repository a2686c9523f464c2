"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class LicenseKeyDTO:
    """DTO for license key information."""

    id: uuid.UUID
    key: str
    email: str
    sale_id: str
    is_used: bool
    activated_at: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_entity(cls, license_key) -> "LicenseKeyDTO":
        return cls(
            id=license_key.id,
            key=license_key.key,
            email=str(license_key.email),
            sale_id=license_key.sale_id,
            is_used=license_key.is_used,
            activated_at=license_key.activated_at,
            created_at=license_key.created_at,
        )


@dataclass
class IssueLicenseResultDTO:
    """DTO for issue license result."""

    license_key: LicenseKeyDTO
    created: bool


@dataclass
class RedeemLicenseResultDTO:
    """DTO for redeem license result."""

    license_key: str
    activated_at: datetime
