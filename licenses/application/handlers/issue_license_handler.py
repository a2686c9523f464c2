"""
IssueLicenseHandler.

Handles the issue license command sent for each completed purchase.
"""

import logging
from typing import Optional

from django.conf import settings

from core.domain.exceptions import (
    DuplicateSaleError,
    InvalidPurchaseError,
    LicenseIssuanceError,
    LicenseKeyCollisionError,
)
from core.infrastructure.events import event_bus
from core.metrics import license_issuance_collisions_total, licenses_issued_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssueLicenseResultDTO, LicenseKeyDTO
from licenses.domain.events import LicenseKeyIssued
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        license_key_repository: LicenseKeyRepository,
        key_prefix: Optional[str] = None,
        max_attempts: Optional[int] = None,
    ):
        """Initialize handler with repository and key generation settings."""
        self.license_key_repository = license_key_repository
        self.key_prefix = key_prefix or settings.LICENSE_KEY_PREFIX
        self.max_attempts = max_attempts or settings.LICENSE_KEY_MAX_ATTEMPTS

    async def handle(self, command: IssueLicenseCommand) -> IssueLicenseResultDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssueLicenseResultDTO with the key and whether it was newly created

        Raises:
            InvalidPurchaseError: If the email or sale id is unusable
            LicenseIssuanceError: If no unique key could be generated
        """
        sale_id = str(command.sale_id or "").strip()
        if not sale_id:
            raise InvalidPurchaseError("Missing sale id")

        existing = await self.license_key_repository.find_by_sale_id(sale_id)
        if existing:
            logger.info("License key already issued for sale %s", sale_id)
            return IssueLicenseResultDTO(
                license_key=LicenseKeyDTO.from_entity(existing), created=False
            )

        try:
            license_key = LicenseKey.create(
                prefix=self.key_prefix, email=command.email, sale_id=sale_id
            )
        except ValueError as e:
            raise InvalidPurchaseError(str(e)) from e

        for attempt in range(1, self.max_attempts + 1):
            try:
                saved_key = await self.license_key_repository.insert(license_key)
                break
            except LicenseKeyCollisionError:
                license_issuance_collisions_total.inc()
                logger.warning(
                    "Generated license key collided (attempt %d/%d)", attempt, self.max_attempts
                )
                license_key = license_key.with_new_key(self.key_prefix)
            except DuplicateSaleError:
                # Another delivery of the same webhook won the race
                concurrent = await self.license_key_repository.find_by_sale_id(sale_id)
                logger.info("License key for sale %s issued concurrently", sale_id)
                return IssueLicenseResultDTO(
                    license_key=LicenseKeyDTO.from_entity(concurrent), created=False
                )
        else:
            logger.error(
                "Could not generate a unique license key after %d attempts", self.max_attempts
            )
            raise LicenseIssuanceError()

        licenses_issued_total.inc()
        logger.info(
            "License key issued",
            extra={"license_key_id": str(saved_key.id), "sale_id": sale_id},
        )

        await event_bus.publish(
            LicenseKeyIssued(
                aggregate_id=str(saved_key.id),
                license_key_id=saved_key.id,
                license_key=saved_key.key,
                email=str(saved_key.email),
                sale_id=saved_key.sale_id,
            )
        )

        return IssueLicenseResultDTO(
            license_key=LicenseKeyDTO.from_entity(saved_key), created=True
        )
