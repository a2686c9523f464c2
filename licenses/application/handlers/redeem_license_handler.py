"""
RedeemLicenseHandler.

Handles redemption of a license key by the client application.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from django.conf import settings

from core.domain.exceptions import InvalidLicenseKeyError
from core.infrastructure.events import event_bus
from core.metrics import license_redemptions_rejected_total, licenses_redeemed_total
from licenses.application.commands.redeem_license import RedeemLicenseCommand
from licenses.application.dto.license_dto import RedeemLicenseResultDTO
from licenses.domain.events import LicenseKeyRedeemed
from licenses.domain.services import LicenseKeyFormat
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class RedeemLicenseHandler:
    """Handler for RedeemLicenseCommand."""

    def __init__(
        self,
        license_key_repository: LicenseKeyRepository,
        key_prefix: Optional[str] = None,
    ):
        """Initialize handler with repository."""
        self.license_key_repository = license_key_repository
        self.key_prefix = key_prefix or settings.LICENSE_KEY_PREFIX

    async def handle(self, command: RedeemLicenseCommand) -> RedeemLicenseResultDTO:
        """
        Handle redeem license command.

        Args:
            command: RedeemLicenseCommand

        Returns:
            RedeemLicenseResultDTO

        Raises:
            InvalidLicenseKeyError: If the key is malformed, unknown or already used
        """
        well_formed, key = LicenseKeyFormat.validate(command.license_key, self.key_prefix)
        if not well_formed:
            license_redemptions_rejected_total.labels(reason="malformed").inc()
            logger.info("Rejected malformed license key")
            raise InvalidLicenseKeyError()

        redeemed = await self.license_key_repository.mark_redeemed(
            key, datetime.now(timezone.utc)
        )
        if redeemed is None:
            license_redemptions_rejected_total.labels(reason="unknown_or_used").inc()
            logger.info("Rejected unknown or already redeemed license key")
            raise InvalidLicenseKeyError()

        licenses_redeemed_total.inc()
        logger.info("License key redeemed", extra={"license_key_id": str(redeemed.id)})

        await event_bus.publish(
            LicenseKeyRedeemed(aggregate_id=str(redeemed.id), license_key_id=redeemed.id)
        )

        return RedeemLicenseResultDTO(
            license_key=redeemed.key, activated_at=redeemed.activated_at
        )
