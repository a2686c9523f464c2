"""
Access to required configuration values.
"""
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


def get_required_setting(name: str) -> str:
    """
    Return a setting that must be configured for an operation to work.

    Secrets are read at first use so that the rest of the service keeps
    running when, say, only the LLM key is missing.

    Args:
        name: Setting (and environment variable) name

    Returns:
        The configured value

    Raises:
        ImproperlyConfigured: If the setting is missing or empty
    """
    value = getattr(settings, name, None)
    if value is None or (isinstance(value, str) and not value.strip()):
        logger.error("Required setting %s is not configured", name)
        raise ImproperlyConfigured(f"{name} is not configured")
    return value
