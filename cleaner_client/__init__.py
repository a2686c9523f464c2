"""
Client for the Prompt Cleaner service.

Keeps the local usage state, enforces the free tier daily limit
before any network call, and talks to the service over HTTP.
"""
from cleaner_client.app import PromptCleanerApp
from cleaner_client.exceptions import (
    ClientError,
    InvalidLicenseKey,
    ServiceError,
    UsageLimitReached,
)
from cleaner_client.usage_gate import DAILY_LIMIT, UsageGate

__all__ = (
    "DAILY_LIMIT",
    "ClientError",
    "InvalidLicenseKey",
    "PromptCleanerApp",
    "ServiceError",
    "UsageGate",
    "UsageLimitReached",
)
