"""
IssueLicenseCommand.

Command to issue a license key for a completed purchase.
"""

from dataclasses import dataclass


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a license key.

    One key is issued per sale; repeating the command for the
    same sale returns the key issued the first time.
    """

    email: str
    sale_id: str
