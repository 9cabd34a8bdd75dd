"""
License model.
"""
import uuid

from django.db import models

from licenses.domain.license_key import MAX_LICENSE_KEY_LENGTH, generate_license_key


class License(models.Model):
    """
    Grants use of a product under a plan.
    Funded by at most one invoice; the invoice link is cleared when the invoice is deleted.
    """

    STATUS_CHOICES = [
        ("Inactive", "Inactive"),
        ("Active", "Active"),
        ("Expired", "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(
        max_length=MAX_LICENSE_KEY_LENGTH, unique=True, default=generate_license_key
    )
    product = models.ForeignKey(
        "catalog.Product", on_delete=models.PROTECT, related_name="licenses"
    )
    plan = models.ForeignKey("catalog.Plan", on_delete=models.PROTECT, related_name="licenses")
    user = models.ForeignKey(
        "accounts.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="licenses",
    )
    invoice = models.ForeignKey(
        "billing.Invoice",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="licenses",
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="Inactive")
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "expires_at"]),
            models.Index(fields=["invoice"]),
            models.Index(fields=["user"]),
        ]

    def __str__(self):
        return self.key
