"""
Test settings for PromptCleanerService.
"""

import os
import urllib.parse

from .base import *  # noqa: F403, F401

DEBUG = False

# Use PostgreSQL in CI (from DATABASE_URL), a SQLite file for local tests.
# The file (not :memory:) lets concurrent redemption tests open one
# connection per thread against the same database.
DATABASE_URL = os.environ.get("DATABASE_URL")
if DATABASE_URL and DATABASE_URL.startswith("postgresql"):
    parsed = urllib.parse.urlparse(DATABASE_URL)
    db_name = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": db_name,
            "USER": parsed.username or "postgres",
            "PASSWORD": parsed.password or "",
            "HOST": parsed.hostname or "localhost",
            "PORT": parsed.port or 5432,
            "TEST": {
                "NAME": db_name + "_test",
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "test_db.sqlite3",  # noqa: F405
            "OPTIONS": {
                "timeout": 20,
                "transaction_mode": "IMMEDIATE",
            },
            "TEST": {
                "NAME": BASE_DIR / "test_db.sqlite3",  # noqa: F405
            },
        }
    }

MIGRATION_MODULES = {}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = "memory://"

LICENSE_KEY_PREFIX = "PCLN"
LICENSE_WEBHOOK_SECRET = "test-webhook-secret"
LICENSE_WEBHOOK_REQUIRE_SIGNATURE = True
LICENSE_WEBHOOK_PRODUCT_ID = ""
LICENSE_LOOKUP_DELIVERY = "response"

OPENAI_API_KEY = "sk-test"
PROMPT_REQUIRE_LICENSE_FOR_PRO = False

# Disable logging during tests
LOGGING_CONFIG = None
