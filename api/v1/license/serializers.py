"""
Serializers for License API endpoints.
"""

from rest_framework import serializers


class PurchaseSerializer(serializers.Serializer):
    """Purchase section of the payment provider webhook."""

    email = serializers.EmailField(required=True)
    id = serializers.CharField(required=True, max_length=128, trim_whitespace=True)
    product_id = serializers.CharField(required=False, allow_blank=True, max_length=128)


class IssueLicenseRequestSerializer(serializers.Serializer):
    """Serializer for the purchase webhook body."""

    purchase = PurchaseSerializer(required=True)


class IssueLicenseResponseSerializer(serializers.Serializer):
    """Serializer for issue license response."""

    success = serializers.BooleanField()


class ValidateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for validate (redeem) license request."""

    licenseKey = serializers.CharField(required=True, allow_blank=False, max_length=100)


class ValidateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for validate license response."""

    valid = serializers.BooleanField()


class LookupLicenseResponseSerializer(serializers.Serializer):
    """Serializer for lookup license response."""

    licenseKey = serializers.CharField()


class LookupLicenseSentResponseSerializer(serializers.Serializer):
    """Serializer for lookup response when the key is delivered by email."""

    sent = serializers.BooleanField()
