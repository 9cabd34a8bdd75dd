"""
Django admin configuration for catalog app.
"""

from django.contrib import admin

from catalog.infrastructure.models import Plan, Product


class PlanInline(admin.TabularInline):
    """Inline plans on the product page."""

    model = Plan
    extra = 0
    fields = ["name", "price", "device_limit", "duration_days"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["name", "plan_count", "created_at"]
    list_filter = ["created_at", "updated_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [PlanInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "description"),
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

    def plan_count(self, obj):
        """Display number of plans for this product."""
        return obj.plans.count()

    plan_count.short_description = "Plans"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).prefetch_related("plans")


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    """Admin interface for Plan model."""

    list_display = ["name", "product", "price", "device_limit", "duration_days"]
    list_filter = ["product"]
    search_fields = ["name", "product__name"]
    readonly_fields = ["id", "created_at", "updated_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product")
