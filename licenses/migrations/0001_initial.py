import uuid

import django.db.models.query_utils
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LicenseKey",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("key", models.CharField(db_index=True, max_length=64, unique=True)),
                ("email", models.EmailField(db_index=True, max_length=254)),
                ("sale_id", models.CharField(max_length=128, unique=True)),
                ("is_used", models.BooleanField(default=False)),
                ("activated_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(db_index=True)),
            ],
            options={
                "db_table": "license_keys",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["email", "-created_at"], name="license_key_email_created"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            django.db.models.query_utils.Q(
                                ("activated_at__isnull", False), ("is_used", True)
                            ),
                            django.db.models.query_utils.Q(
                                ("activated_at__isnull", True), ("is_used", False)
                            ),
                            _connector="OR",
                        ),
                        name="license_key_activated_iff_used",
                    )
                ],
            },
        ),
    ]
