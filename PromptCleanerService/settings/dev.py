"""
Development settings for PromptCleanerService.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Database - Use PostgreSQL in Docker, SQLite for local development
# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
            "OPTIONS": {
                "timeout": 20,
                "transaction_mode": "IMMEDIATE",
            },
        }
    }

# Unsigned purchase webhooks are accepted locally unless explicitly required
LICENSE_WEBHOOK_REQUIRE_SIGNATURE = (
    os.environ.get("LICENSE_WEBHOOK_REQUIRE_SIGNATURE", "false").lower() == "true"
)

# Run notification tasks inline, no broker needed
CELERY_TASK_ALWAYS_EAGER = True

# Email backend for development
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

LOGGING = get_logging_config("development")
