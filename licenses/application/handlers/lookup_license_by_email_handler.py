"""
LookupLicenseByEmailHandler.

Handler for retrieving a purchaser's license key by email.
"""

import logging

from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import Email
from licenses.application.dto.license_dto import LicenseKeyDTO
from licenses.application.queries.lookup_license_by_email import LookupLicenseByEmailQuery
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class LookupLicenseByEmailHandler:
    """Handler for LookupLicenseByEmailQuery."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repository."""
        self.license_key_repository = license_key_repository

    async def handle(self, query: LookupLicenseByEmailQuery) -> LicenseKeyDTO:
        """
        Handle lookup by email query.

        Args:
            query: LookupLicenseByEmailQuery

        Returns:
            LicenseKeyDTO of the most recently issued key

        Raises:
            LicenseNotFoundError: If the email has no license key
        """
        try:
            email = Email(query.email)
        except ValueError:
            raise LicenseNotFoundError()

        license_key = await self.license_key_repository.find_latest_by_email(str(email))
        if license_key is None:
            logger.info("No license key found for lookup")
            raise LicenseNotFoundError()

        return LicenseKeyDTO.from_entity(license_key)
