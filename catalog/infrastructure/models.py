"""
Product and Plan models.
"""
import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    Represents a piece of software that can be licensed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, help_text="Product display name")
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Plan(models.Model):
    """
    A priced offering of a product.
    Controls device limit and license duration (0 days = permanent).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="plans")
    name = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    device_limit = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text="Maximum number of active devices per license",
    )
    duration_days = models.PositiveIntegerField(
        default=0, help_text="License duration in days, 0 for permanent"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "plans"
        ordering = ["product", "price"]
        indexes = [
            models.Index(fields=["product"]),
        ]

    def __str__(self):
        return f"{self.product.name} - {self.name}"
