"""
Django admin configuration for devices app.
"""
from django.contrib import admin

from devices.infrastructure.models import Device


@admin.register(Device)
class DeviceAdmin(admin.ModelAdmin):
    """Admin interface for Device model."""

    list_display = [
        "computer_id",
        "name",
        "license",
        "is_active",
        "activated_at",
        "last_seen_at",
    ]
    list_filter = ["is_active", "activated_at", "last_seen_at"]
    search_fields = ["computer_id", "name", "license__key"]
    readonly_fields = ["id", "activated_at", "last_seen_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")
