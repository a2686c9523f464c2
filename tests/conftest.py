"""
Pytest configuration and shared fixtures.
"""

from datetime import timedelta
from unittest import mock

import pytest
from asgiref.sync import async_to_sync
from django.utils import timezone

from core.domain.exceptions import DuplicateSaleError, LicenseKeyCollisionError
from core.infrastructure.webhooks import WebhookSignatureVerifier
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from licenses.ports.license_key_repository import LicenseKeyRepository
from prompts.domain.cleaning import Completion
from prompts.ports.llm_client import LLMClient

WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture
def license_key_repository():
    """Fixture for LicenseKeyRepository."""
    return DjangoLicenseKeyRepository()


@pytest.fixture
def sample_license_key():
    """Fixture for a sample, unsaved LicenseKey entity."""
    return LicenseKey.create(prefix="PCLN", email="buyer@example.com", sale_id="sale-0001")


@pytest.fixture
def db_license_key(db, license_key_repository):
    """Fixture for an unused LicenseKey saved in database."""
    key = LicenseKey.create(prefix="PCLN", email="buyer@example.com", sale_id="sale-db-0001")
    return async_to_sync(license_key_repository.insert)(key)


@pytest.fixture
def db_redeemed_license_key(db, license_key_repository):
    """Fixture for a redeemed LicenseKey saved in database."""
    key = LicenseKey.create(prefix="PCLN", email="pro@example.com", sale_id="sale-db-0002")
    saved = async_to_sync(license_key_repository.insert)(key)
    return async_to_sync(license_key_repository.mark_redeemed)(
        saved.key, timezone.now() - timedelta(minutes=5)
    )


@pytest.fixture
def fake_llm_client():
    """Fixture for an LLMClient returning a fixed completion."""
    client = mock.Mock(spec=LLMClient)
    client.complete.return_value = Completion(content="  Cleaned prompt.  \n", total_tokens=42)
    return client


@pytest.fixture
def sign():
    """Fixture returning a function that signs a raw webhook body."""

    def _sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
        return WebhookSignatureVerifier.generate_signature(body, secret)

    return _sign


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


class InMemoryLicenseKeyRepository(LicenseKeyRepository):
    """LicenseKeyRepository keeping keys in a dict, for handler unit tests."""

    def __init__(self):
        self.keys = {}
        self.insert_attempts = 0
        self.colliding_keys = set()

    async def insert(self, license_key):
        self.insert_attempts += 1
        if any(k.sale_id == license_key.sale_id for k in self.keys.values()):
            raise DuplicateSaleError()
        if license_key.key in self.keys or license_key.key in self.colliding_keys:
            raise LicenseKeyCollisionError()
        self.keys[license_key.key] = license_key
        return license_key

    async def find_by_key(self, key):
        return self.keys.get(key)

    async def find_by_sale_id(self, sale_id):
        return next((k for k in self.keys.values() if k.sale_id == sale_id), None)

    async def find_latest_by_email(self, email):
        matches = [k for k in self.keys.values() if str(k.email) == email]
        return max(matches, key=lambda k: k.created_at) if matches else None

    async def mark_redeemed(self, key, at):
        license_key = self.keys.get(key)
        if license_key is None or license_key.is_used:
            return None
        self.keys[key] = license_key.redeem(at)
        return self.keys[key]


@pytest.fixture
def memory_license_key_repository():
    """Fixture for an in-memory LicenseKeyRepository."""
    return InMemoryLicenseKeyRepository()
