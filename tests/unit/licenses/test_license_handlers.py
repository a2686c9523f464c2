"""
Unit tests for license command and query handlers.
"""
from dataclasses import replace
from datetime import timedelta
from unittest import mock

import pytest
from asgiref.sync import async_to_sync

from core.domain.exceptions import (
    InvalidLicenseKeyError,
    InvalidPurchaseError,
    LicenseIssuanceError,
    LicenseNotFoundError,
)
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.redeem_license import RedeemLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.lookup_license_by_email_handler import (
    LookupLicenseByEmailHandler,
)
from licenses.application.handlers.redeem_license_handler import RedeemLicenseHandler
from licenses.application.queries.lookup_license_by_email import LookupLicenseByEmailQuery
from licenses.domain.events import LicenseKeyIssued, LicenseKeyRedeemed
from licenses.domain.license_key import LicenseKey

TAKEN_KEY = "PCLN-AAAA-AAAA-AAAA-AAAA"
FREE_KEY = "PCLN-BBBB-BBBB-BBBB-BBBB"


@pytest.fixture
def published_events():
    """Capture events published by the handlers."""
    events = []

    async def publish(event):
        events.append(event)

    with mock.patch("core.infrastructure.events.event_bus.publish", side_effect=publish):
        yield events


class TestIssueLicenseHandler:
    """Tests for IssueLicenseHandler."""

    def test_issue(self, memory_license_key_repository, published_events):
        """Test a purchase gets a new unused key and an event."""
        handler = IssueLicenseHandler(memory_license_key_repository, key_prefix="PCLN")

        result = async_to_sync(handler.handle)(
            IssueLicenseCommand(email="Buyer@Example.com", sale_id="sale-1")
        )

        assert result.created is True
        assert result.license_key.email == "buyer@example.com"
        assert result.license_key.is_used is False
        assert result.license_key.key in memory_license_key_repository.keys
        assert len(published_events) == 1
        assert isinstance(published_events[0], LicenseKeyIssued)
        assert published_events[0].license_key == result.license_key.key

    def test_same_sale_is_idempotent(self, memory_license_key_repository, published_events):
        """Test a repeated webhook returns the first key without a new event."""
        handler = IssueLicenseHandler(memory_license_key_repository, key_prefix="PCLN")
        command = IssueLicenseCommand(email="buyer@example.com", sale_id="sale-1")

        first = async_to_sync(handler.handle)(command)
        second = async_to_sync(handler.handle)(command)

        assert second.created is False
        assert second.license_key.key == first.license_key.key
        assert len(memory_license_key_repository.keys) == 1
        assert len(published_events) == 1

    def test_collision_is_retried(self, memory_license_key_repository, published_events):
        """Test a colliding key is regenerated."""
        memory_license_key_repository.colliding_keys.add(TAKEN_KEY)
        handler = IssueLicenseHandler(
            memory_license_key_repository, key_prefix="PCLN", max_attempts=5
        )

        with mock.patch(
            "licenses.domain.license_key.generate_license_key",
            side_effect=[TAKEN_KEY, TAKEN_KEY, FREE_KEY],
        ):
            result = async_to_sync(handler.handle)(
                IssueLicenseCommand(email="buyer@example.com", sale_id="sale-1")
            )

        assert result.license_key.key == FREE_KEY
        assert memory_license_key_repository.insert_attempts == 3

    def test_collisions_exhaust_attempts(self, memory_license_key_repository, published_events):
        """Test issuance gives up with a retryable error after max attempts."""
        memory_license_key_repository.colliding_keys.add(TAKEN_KEY)
        handler = IssueLicenseHandler(
            memory_license_key_repository, key_prefix="PCLN", max_attempts=5
        )

        with mock.patch(
            "licenses.domain.license_key.generate_license_key", return_value=TAKEN_KEY
        ):
            with pytest.raises(LicenseIssuanceError) as exc_info:
                async_to_sync(handler.handle)(
                    IssueLicenseCommand(email="buyer@example.com", sale_id="sale-1")
                )

        assert exc_info.value.retryable is True
        assert memory_license_key_repository.insert_attempts == 5
        assert memory_license_key_repository.keys == {}
        assert published_events == []

    def test_invalid_email(self, memory_license_key_repository, published_events):
        handler = IssueLicenseHandler(memory_license_key_repository, key_prefix="PCLN")
        with pytest.raises(InvalidPurchaseError):
            async_to_sync(handler.handle)(IssueLicenseCommand(email="nope", sale_id="sale-1"))

    def test_missing_sale_id(self, memory_license_key_repository, published_events):
        handler = IssueLicenseHandler(memory_license_key_repository, key_prefix="PCLN")
        with pytest.raises(InvalidPurchaseError):
            async_to_sync(handler.handle)(
                IssueLicenseCommand(email="buyer@example.com", sale_id="  ")
            )


class TestRedeemLicenseHandler:
    """Tests for RedeemLicenseHandler."""

    def _store(self, repository, sample_license_key):
        repository.keys[sample_license_key.key] = sample_license_key
        return sample_license_key

    def test_redeem_once(self, memory_license_key_repository, sample_license_key, published_events):
        """Test a key is valid exactly once."""
        stored = self._store(memory_license_key_repository, sample_license_key)
        handler = RedeemLicenseHandler(memory_license_key_repository, key_prefix="PCLN")

        result = async_to_sync(handler.handle)(RedeemLicenseCommand(license_key=stored.key))
        assert result.license_key == stored.key
        assert memory_license_key_repository.keys[stored.key].is_used is True
        assert isinstance(published_events[0], LicenseKeyRedeemed)

        with pytest.raises(InvalidLicenseKeyError):
            async_to_sync(handler.handle)(RedeemLicenseCommand(license_key=stored.key))

    def test_redeem_accepts_lower_case_input(
        self, memory_license_key_repository, sample_license_key, published_events
    ):
        stored = self._store(memory_license_key_repository, sample_license_key)
        handler = RedeemLicenseHandler(memory_license_key_repository, key_prefix="PCLN")

        async_to_sync(handler.handle)(
            RedeemLicenseCommand(license_key=f"  {stored.key.lower()} ")
        )
        assert memory_license_key_repository.keys[stored.key].is_used is True

    def test_unknown_key(self, memory_license_key_repository, published_events):
        """Test an absent key is invalid and nothing changes."""
        handler = RedeemLicenseHandler(memory_license_key_repository, key_prefix="PCLN")
        with pytest.raises(InvalidLicenseKeyError):
            async_to_sync(handler.handle)(RedeemLicenseCommand(license_key=FREE_KEY))
        assert published_events == []

    def test_malformed_key_never_reaches_storage(self, published_events):
        """Test malformed keys are rejected before any repository call."""
        repository = mock.Mock()
        handler = RedeemLicenseHandler(repository, key_prefix="PCLN")

        for raw in ["", "garbage", "PCLN-123", None, "PCLN-AAAA-BBBB-CCCC-DDDD' OR 1=1 --"]:
            with pytest.raises(InvalidLicenseKeyError):
                async_to_sync(handler.handle)(RedeemLicenseCommand(license_key=raw))

        repository.mark_redeemed.assert_not_called()


class TestLookupLicenseByEmailHandler:
    """Tests for LookupLicenseByEmailHandler."""

    def test_returns_most_recent_key(self, memory_license_key_repository):
        """Test the latest issued key wins when an email bought twice."""
        older = LicenseKey.create(prefix="PCLN", email="buyer@example.com", sale_id="s-1")
        older = replace(older, created_at=older.created_at - timedelta(days=1))
        newer = LicenseKey.create(prefix="PCLN", email="buyer@example.com", sale_id="s-2")
        memory_license_key_repository.keys = {older.key: older, newer.key: newer}
        handler = LookupLicenseByEmailHandler(memory_license_key_repository)

        result = async_to_sync(handler.handle)(
            LookupLicenseByEmailQuery(email="BUYER@example.com")
        )

        assert result.key == newer.key

    def test_unknown_email(self, memory_license_key_repository):
        handler = LookupLicenseByEmailHandler(memory_license_key_repository)
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(handler.handle)(
                LookupLicenseByEmailQuery(email="nobody@example.com")
            )

    def test_malformed_email_is_not_found(self, memory_license_key_repository):
        handler = LookupLicenseByEmailHandler(memory_license_key_repository)
        with pytest.raises(LicenseNotFoundError):
            async_to_sync(handler.handle)(LookupLicenseByEmailQuery(email="not-an-email"))
