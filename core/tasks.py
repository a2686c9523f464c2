"""
Celery tasks for background processing.

Tasks for purchaser notification emails.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import send_mail

from PromptCleanerService.celery import app

logger = logging.getLogger(__name__)

LICENSE_EMAIL_SUBJECT = "Your Prompt Cleaner Pro license key"

LICENSE_EMAIL_BODY = """Thanks for upgrading to Prompt Cleaner Pro!

Your license key:

    {license_key}

Open Prompt Cleaner, choose "Redeem license" and paste the key above.
Each key can be redeemed once.
"""


@app.task(bind=True, max_retries=3)
def send_license_key_email_task(self, email: str, license_key: str):
    """
    Celery task that emails a license key to its purchaser.

    Args:
        email: Purchaser email address
        license_key: Issued license key
    """
    try:
        send_mail(
            subject=LICENSE_EMAIL_SUBJECT,
            message=LICENSE_EMAIL_BODY.format(license_key=license_key),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[email],
        )
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("License key email failed: %s", exc)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)

    logger.info("License key email sent")
