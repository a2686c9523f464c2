"""
LicenseKey model.
"""
import uuid

from django.db import models
from django.db.models import Q


class LicenseKey(models.Model):
    """
    A single-use license key issued for one sale.
    Redeeming it unlocks the pro tier of the client.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=64, unique=True, db_index=True)
    email = models.EmailField(db_index=True)
    sale_id = models.CharField(max_length=128, unique=True)
    is_used = models.BooleanField(default=False)
    activated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(db_index=True)

    class Meta:
        db_table = "license_keys"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["email", "-created_at"], name="license_key_email_created"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(is_used=True, activated_at__isnull=False)
                    | Q(is_used=False, activated_at__isnull=True)
                ),
                name="license_key_activated_iff_used",
            ),
        ]

    def __str__(self):
        return self.key
