"""
Serializers for Prompt API endpoints.
"""

from rest_framework import serializers


class CleanPromptRequestSerializer(serializers.Serializer):
    """Serializer for clean prompt request."""

    prompt = serializers.CharField(required=True, allow_blank=True, trim_whitespace=False)
    isProUser = serializers.BooleanField(required=False, default=False)
    licenseKey = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_prompt(self, value):
        """Reject prompts that were not sent as JSON strings."""
        if not isinstance(self.initial_data.get("prompt"), str):
            raise serializers.ValidationError("Prompt must be a string")
        return value


class CleanPromptResponseSerializer(serializers.Serializer):
    """Serializer for clean prompt response."""

    output = serializers.CharField()
    model = serializers.CharField()
    tokensUsed = serializers.IntegerField(source="tokens_used")
