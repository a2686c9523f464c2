"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from licenses.domain.license_key import is_well_formed


class LicenseKeyFormat:
    """Domain service for license key format checks."""

    @staticmethod
    def normalize(raw_key) -> str:
        """
        Normalize a caller supplied key.

        Surrounding whitespace is dropped and letters are upper-cased,
        since keys are often retyped by hand.
        """
        if not isinstance(raw_key, str):
            return ""
        return raw_key.strip().upper()

    @staticmethod
    def validate(raw_key, prefix: str) -> tuple[bool, str]:
        """
        Validate a license key format.

        Args:
            raw_key: Key as received from the caller
            prefix: Expected key prefix

        Returns:
            Tuple of (is_well_formed, normalized_key)
        """
        key = LicenseKeyFormat.normalize(raw_key)
        return is_well_formed(key, prefix), key
