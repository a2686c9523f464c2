"""
LicenseKey repository port (interface).

This defines the contract for license key persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from licenses.domain.license_key import LicenseKey


class LicenseKeyRepository(ABC):
    """
    Abstract repository for LicenseKey entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def insert(self, license_key: LicenseKey) -> LicenseKey:
        """
        Insert a new license key.

        Args:
            license_key: LicenseKey entity to insert

        Returns:
            Stored license key entity

        Raises:
            LicenseKeyCollisionError: If the key string is already taken
            DuplicateSaleError: If a key already exists for the sale
        """
        pass

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[LicenseKey]:
        """
        Find a license key by key string.

        Args:
            key: License key string

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_sale_id(self, sale_id: str) -> Optional[LicenseKey]:
        """
        Find the license key issued for a sale.

        Args:
            sale_id: Payment provider sale identifier

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def find_latest_by_email(self, email: str) -> Optional[LicenseKey]:
        """
        Find the most recently issued license key for an email.

        Args:
            email: Normalized purchaser email

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def mark_redeemed(self, key: str, at: datetime) -> Optional[LicenseKey]:
        """
        Atomically flip an unused key to used.

        Args:
            key: License key string
            at: Activation timestamp to record

        Returns:
            The redeemed LicenseKey, or None if the key is unknown
            or was already used
        """
        pass
