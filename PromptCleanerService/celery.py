"""
Celery configuration for background tasks.

Used for purchaser notification emails.
"""
import os

from celery import Celery

# Set default Django settings module
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "PromptCleanerService.settings.base")

app = Celery("PromptCleanerService")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()
