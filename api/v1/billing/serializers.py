"""
Serializers for company, bank and invoice endpoints.
"""

from rest_framework import serializers

from api.v1.licenses.serializers import LicenseDTOSerializer
from billing.infrastructure.models import Bank, Company
from core.domain.value_objects import InvoiceStatus, PaymentMethod

INVOICE_STATUS_CHOICES = [status.value for status in InvoiceStatus]
PAYMENT_METHOD_CHOICES = [method.value for method in PaymentMethod]


class CompanySerializer(serializers.ModelSerializer):
    """Serializer for companies."""

    class Meta:
        model = Company
        fields = ["id", "name", "address", "phone", "email", "website", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class BankSerializer(serializers.ModelSerializer):
    """Serializer for bank accounts."""

    class Meta:
        model = Bank
        fields = ["id", "name", "account_number", "owner_name", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class LineItemRequestSerializer(serializers.Serializer):
    """One line item of an invoice request."""

    plan_id = serializers.UUIDField()
    description = serializers.CharField(required=False, allow_blank=True, max_length=500)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class CreateInvoiceRequestSerializer(serializers.Serializer):
    """Serializer for create invoice request."""

    invoice_number = serializers.CharField(required=False, allow_blank=True, max_length=64)
    company_id = serializers.UUIDField()
    bank_id = serializers.UUIDField(required=False, allow_null=True)
    issue_date = serializers.DateTimeField()
    due_date = serializers.DateTimeField()
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    status = serializers.ChoiceField(choices=INVOICE_STATUS_CHOICES, required=False)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, required=False)
    line_items = LineItemRequestSerializer(many=True, required=False)
    issue_licenses = serializers.BooleanField(required=False, default=False)
    license_ids = serializers.ListField(child=serializers.UUIDField(), required=False)

    def validate(self, attrs):
        if attrs["due_date"] < attrs["issue_date"]:
            raise serializers.ValidationError(
                {"due_date": ["Due date cannot be before the issue date."]}
            )
        return attrs


class UpdateInvoiceRequestSerializer(serializers.Serializer):
    """
    Serializer for update invoice request.

    ``line_items``, when supplied, replaces all existing line items.
    """

    invoice_number = serializers.CharField(required=False, max_length=64)
    company_id = serializers.UUIDField(required=False)
    bank_id = serializers.UUIDField(required=False, allow_null=True)
    issue_date = serializers.DateTimeField(required=False)
    due_date = serializers.DateTimeField(required=False)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    status = serializers.ChoiceField(choices=INVOICE_STATUS_CHOICES, required=False)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, required=False)
    line_items = LineItemRequestSerializer(many=True, required=False)


class LineItemDTOSerializer(serializers.Serializer):
    """Serializer for LineItemDTO."""

    id = serializers.UUIDField()
    plan_id = serializers.UUIDField()
    description = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)


class InvoiceDTOSerializer(serializers.Serializer):
    """Serializer for InvoiceDTO."""

    id = serializers.UUIDField()
    invoice_number = serializers.CharField()
    company_id = serializers.UUIDField()
    bank_id = serializers.UUIDField(allow_null=True)
    issue_date = serializers.DateTimeField()
    due_date = serializers.DateTimeField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = serializers.CharField()
    payment_method = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    line_items = LineItemDTOSerializer(many=True)
    licenses = LicenseDTOSerializer(many=True)
