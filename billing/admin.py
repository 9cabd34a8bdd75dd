"""
Django admin configuration for billing app.
"""
from django.contrib import admin
from django.utils.html import format_html

from billing.infrastructure.models import Bank, Company, Invoice, InvoiceLineItem


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    """Admin interface for Company model."""

    list_display = ["name", "email", "phone", "invoice_count", "created_at"]
    search_fields = ["name", "email"]
    readonly_fields = ["id", "created_at", "updated_at"]

    def invoice_count(self, obj):
        """Display number of invoices for this company."""
        return obj.invoices.count()

    invoice_count.short_description = "Invoices"


@admin.register(Bank)
class BankAdmin(admin.ModelAdmin):
    """Admin interface for Bank model."""

    list_display = ["name", "account_number", "owner_name"]
    search_fields = ["name", "account_number", "owner_name"]
    readonly_fields = ["id", "created_at", "updated_at"]


class InvoiceLineItemInline(admin.TabularInline):
    """Inline line items on the invoice page."""

    model = InvoiceLineItem
    extra = 0
    fields = ["position", "plan", "description", "quantity", "unit_price", "total"]


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """
    Admin interface for Invoice model.

    Status changes made here bypass the license cascade; use the API to
    change invoice status.
    """

    list_display = [
        "invoice_number",
        "company",
        "status_display",
        "total",
        "payment_method",
        "issue_date",
        "due_date",
    ]
    list_filter = ["status", "payment_method", "issue_date"]
    search_fields = ["invoice_number", "company__name"]
    readonly_fields = ["id", "status", "created_at", "updated_at"]
    inlines = [InvoiceLineItemInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "invoice_number", "company", "status", "total"),
            },
        ),
        (
            "Payment",
            {
                "fields": ("payment_method", "bank", "issue_date", "due_date"),
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
            "Paid": "green",
            "Unpaid": "orange",
            "Overdue": "red",
        }
        color = colors.get(obj.status, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.get_status_display(),
        )

    status_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("company", "bank")
