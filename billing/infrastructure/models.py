"""
Company, Bank, Invoice and InvoiceLineItem models.
"""
import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Company(models.Model):
    """
    A customer organisation. Invoices are issued to companies.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True, null=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    website = models.URLField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "companies"
        ordering = ["name"]
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name


class Bank(models.Model):
    """
    A bank account invoices can be paid into.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    account_number = models.CharField(max_length=64)
    owner_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "banks"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} {self.account_number}"


class Invoice(models.Model):
    """
    An invoice billed to a company.
    Its status drives the status of the licenses it funds.
    """

    STATUS_CHOICES = [
        ("Unpaid", "Unpaid"),
        ("Paid", "Paid"),
        ("Overdue", "Overdue"),
    ]

    PAYMENT_METHOD_CHOICES = [
        ("Cash", "Cash"),
        ("Bank", "Bank"),
        ("Qris", "QRIS"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice_number = models.CharField(max_length=64, unique=True)
    company = models.ForeignKey(Company, on_delete=models.PROTECT, related_name="invoices")
    bank = models.ForeignKey(
        Bank, on_delete=models.SET_NULL, null=True, blank=True, related_name="invoices"
    )
    payment_method = models.CharField(
        max_length=10, choices=PAYMENT_METHOD_CHOICES, default="Cash"
    )
    issue_date = models.DateTimeField()
    due_date = models.DateTimeField()
    total = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="Unpaid")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "invoices"
        ordering = ["-issue_date", "-created_at"]
        indexes = [
            models.Index(fields=["company", "status"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self):
        return self.invoice_number


class InvoiceLineItem(models.Model):
    """
    A billed position. Owned by exactly one invoice and deleted with it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name="line_items")
    plan = models.ForeignKey("catalog.Plan", on_delete=models.PROTECT, related_name="line_items")
    description = models.CharField(max_length=500, blank=True, default="")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    total = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "invoice_line_items"
        ordering = ["invoice", "position"]

    def __str__(self):
        return f"{self.invoice.invoice_number} #{self.position} {self.description}"
