"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseKeyIssued(DomainEvent):
    """Event raised when a license key is issued for a sale."""

    license_key_id: uuid.UUID
    license_key: str
    email: str
    sale_id: str

    def to_dict(self):
        data = super().to_dict()
        data.update({"email": self.email, "sale_id": self.sale_id})
        return data


@dataclass(frozen=True, kw_only=True)
class LicenseKeyRedeemed(DomainEvent):
    """Event raised when a license key is redeemed."""

    license_key_id: uuid.UUID
