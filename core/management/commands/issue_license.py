"""
Django management command to issue a license key by hand.

Used by support when a purchase webhook never arrived.
"""
import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DomainException
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.infrastructure.repositories.django_license_key_repository import (  # noqa: E501
    DjangoLicenseKeyRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to issue a license key for a sale."""

    help = "Issue a license key for a purchaser (idempotent per sale id)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--email",
            type=str,
            required=True,
            help="Purchaser email address",
        )
        parser.add_argument(
            "--sale-id",
            type=str,
            required=True,
            help="Payment provider sale id",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        handler = IssueLicenseHandler(license_key_repository=DjangoLicenseKeyRepository())
        command = IssueLicenseCommand(email=options["email"], sale_id=options["sale_id"])

        try:
            result = async_to_sync(handler.handle)(command)
        except DomainException as e:
            raise CommandError(e.message) from e

        if result.created:
            self.stdout.write(self.style.SUCCESS(f"Issued license key: {result.license_key.key}"))
        else:
            self.stdout.write(
                self.style.WARNING(
                    f"Sale already has a license key: {result.license_key.key}"
                )
            )
