"""
App configuration for Prompt Cleaner Service.
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

_SKIP_COMMANDS = {
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "check",
    "createsuperuser",
}


class PromptCleanerServiceConfig(AppConfig):
    """App configuration for PromptCleanerService."""

    name = "PromptCleanerService"
    verbose_name = "Prompt Cleaner Service"

    def ready(self):
        """Called when Django starts."""
        from core.infrastructure.event_handlers import register_event_handlers

        # Event handlers are needed by every process that issues licenses,
        # including management commands and tests.
        register_event_handlers()

        if len(sys.argv) > 1 and sys.argv[1] in _SKIP_COMMANDS:
            return

        # Django's reloader runs code twice; only the serving child sets up exporters
        if os.environ.get("RUN_MAIN") == "false":
            return

        if os.environ.get("OTEL_ENABLED", "false").lower() == "true":
            from core.instrumentation import setup_opentelemetry

            logger.info("Setting up observability...")
            setup_opentelemetry()
            logger.info("Observability setup complete")
