"""
RedeemLicenseCommand.

Command to redeem a license key from the client application.
"""

from dataclasses import dataclass


@dataclass
class RedeemLicenseCommand:
    """Command to redeem a license key exactly once."""

    license_key: str
