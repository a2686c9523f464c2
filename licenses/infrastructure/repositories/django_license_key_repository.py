"""
Django implementation of LicenseKeyRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from datetime import datetime
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from core.domain.exceptions import DuplicateSaleError, LicenseKeyCollisionError
from core.domain.value_objects import Email
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.models import (
    LicenseKey as LicenseKeyModel,
)
from licenses.ports.license_key_repository import LicenseKeyRepository


class DjangoLicenseKeyRepository(LicenseKeyRepository):
    """
    Django ORM implementation of LicenseKeyRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Turns unique constraint violations into domain errors
    """

    def _to_domain(self, model: LicenseKeyModel) -> LicenseKey:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseKey model

        Returns:
            LicenseKey domain entity
        """
        return LicenseKey(
            id=model.id,
            key=model.key,
            email=Email(model.email),
            sale_id=model.sale_id,
            is_used=model.is_used,
            activated_at=model.activated_at,
            created_at=model.created_at,
        )

    def _to_model(self, license_key: LicenseKey) -> LicenseKeyModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            license_key: LicenseKey domain entity

        Returns:
            Django LicenseKey model
        """
        return LicenseKeyModel(
            id=license_key.id,
            key=license_key.key,
            email=str(license_key.email),
            sale_id=license_key.sale_id,
            is_used=license_key.is_used,
            activated_at=license_key.activated_at,
            created_at=license_key.created_at,
        )

    @sync_to_async
    def insert(self, license_key: LicenseKey) -> LicenseKey:
        """
        Insert a new license key.

        Args:
            license_key: LicenseKey entity to insert

        Returns:
            Stored license key entity
        """
        model = self._to_model(license_key)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError:
            if LicenseKeyModel.objects.filter(sale_id=license_key.sale_id).exists():
                raise DuplicateSaleError()
            if LicenseKeyModel.objects.filter(key=license_key.key).exists():
                raise LicenseKeyCollisionError()
            raise
        return self._to_domain(model)

    @sync_to_async
    def find_by_key(self, key: str) -> Optional[LicenseKey]:
        """
        Find a license key by key string.

        Args:
            key: License key string

        Returns:
            LicenseKey entity or None if not found
        """
        try:
            model = LicenseKeyModel.objects.get(key=key)
            return self._to_domain(model)
        except LicenseKeyModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_sale_id(self, sale_id: str) -> Optional[LicenseKey]:
        """
        Find the license key issued for a sale.

        Args:
            sale_id: Payment provider sale identifier

        Returns:
            LicenseKey entity or None if not found
        """
        try:
            model = LicenseKeyModel.objects.get(sale_id=sale_id)
            return self._to_domain(model)
        except LicenseKeyModel.DoesNotExist:
            return None

    @sync_to_async
    def find_latest_by_email(self, email: str) -> Optional[LicenseKey]:
        """
        Find the most recently issued license key for an email.

        Args:
            email: Normalized purchaser email

        Returns:
            LicenseKey entity or None if not found
        """
        model = (
            LicenseKeyModel.objects.filter(email=email)
            .order_by("-created_at", "-id")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def mark_redeemed(self, key: str, at: datetime) -> Optional[LicenseKey]:
        """
        Atomically flip an unused key to used.

        A conditional UPDATE is the single point of truth: among concurrent
        callers exactly one sees a changed row.

        Args:
            key: License key string
            at: Activation timestamp to record

        Returns:
            The redeemed LicenseKey, or None if nothing was updated
        """
        with transaction.atomic():
            updated = LicenseKeyModel.objects.filter(key=key, is_used=False).update(
                is_used=True, activated_at=at
            )
            if updated != 1:
                return None
            model = LicenseKeyModel.objects.get(key=key)
        return self._to_domain(model)
