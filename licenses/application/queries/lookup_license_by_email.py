"""
LookupLicenseByEmailQuery.

Query to retrieve the license key bought with an email address.
"""

from dataclasses import dataclass


@dataclass
class LookupLicenseByEmailQuery:
    """
    Query for the license key of a purchaser.

    When several keys exist for the email the most recently
    issued one is returned.
    """

    email: str
