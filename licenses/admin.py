"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """
    Admin interface for License model.

    Status is read-only here; it is owned by the lifecycle rules and
    changes through the API or invoice updates.
    """

    list_display = [
        "key",
        "product",
        "plan",
        "status_display",
        "invoice",
        "devices_active",
        "expires_at",
        "created_at",
    ]
    list_filter = ["status", "expires_at", "created_at", "product"]
    search_fields = ["key", "product__name", "user__email", "invoice__invoice_number"]
    readonly_fields = ["id", "status", "created_at", "updated_at", "devices_active"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "key", "product", "plan", "status"),
            },
        ),
        (
            "Ownership",
            {
                "fields": ("user", "invoice", "devices_active"),
            },
        ),
        (
            "Expiration",
            {
                "fields": ("expires_at",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "Active": "green",
            "Inactive": "orange",
            "Expired": "gray",
        }
        color = colors.get(obj.status, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.status,
        )

    status_display.short_description = "Status"

    def devices_active(self, obj):
        """Display active devices against the plan limit."""
        active = obj.devices.filter(is_active=True).count()
        limit = obj.plan.device_limit
        if active >= limit:
            return format_html('<span style="color: red;">{} / {}</span>', active, limit)
        return f"{active} / {limit}"

    devices_active.short_description = "Devices"

    def get_queryset(self, request):
        """Optimize queryset."""
        return (
            super()
            .get_queryset(request)
            .select_related("product", "plan", "invoice", "user")
            .prefetch_related("devices")
        )
