"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import LicenseKey


@admin.register(LicenseKey)
class LicenseKeyAdmin(admin.ModelAdmin):
    """Admin interface for LicenseKey model."""

    list_display = [
        "key",
        "email",
        "sale_id",
        "status_display",
        "activated_at",
        "created_at",
    ]
    list_filter = ["is_used", "created_at", "activated_at"]
    search_fields = ["key", "email", "sale_id"]
    readonly_fields = [
        "id",
        "key",
        "email",
        "sale_id",
        "is_used",
        "activated_at",
        "created_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "key", "email", "sale_id"),
            },
        ),
        (
            "Redemption",
            {
                "fields": ("is_used", "activated_at"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at",),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display redemption status with color coding."""
        if obj.is_used:
            return format_html('<span style="color: gray; font-weight: bold;">{}</span>', "USED")
        return format_html('<span style="color: green; font-weight: bold;">{}</span>', "UNUSED")

    status_display.short_description = "Status"

    def has_add_permission(self, request):
        """Keys are issued through the purchase webhook or issue_license."""
        return False

    def has_delete_permission(self, request, obj=None):
        """License keys are never deleted."""
        return False
