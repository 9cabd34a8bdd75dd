"""
Serializers for license API endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import LicenseStatus

LICENSE_STATUS_CHOICES = [status.value for status in LicenseStatus]


class CreateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for create license request."""

    product_id = serializers.UUIDField()
    plan_id = serializers.UUIDField()
    key = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status = serializers.ChoiceField(choices=LICENSE_STATUS_CHOICES, required=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    user_id = serializers.UUIDField(required=False, allow_null=True)
    invoice_id = serializers.UUIDField(required=False, allow_null=True)


class UpdateLicenseRequestSerializer(serializers.Serializer):
    """
    Serializer for update license request.

    Every field is optional; only supplied fields are changed.
    """

    product_id = serializers.UUIDField(required=False)
    plan_id = serializers.UUIDField(required=False)
    key = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status = serializers.ChoiceField(
        choices=LICENSE_STATUS_CHOICES, required=False, allow_null=True
    )
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    user_id = serializers.UUIDField(required=False, allow_null=True)
    invoice_id = serializers.UUIDField(required=False, allow_null=True)


class LicenseDTOSerializer(serializers.Serializer):
    """Serializer for LicenseDTO (shared with invoice and device responses)."""

    id = serializers.UUIDField()
    key = serializers.CharField()
    product_id = serializers.UUIDField()
    plan_id = serializers.UUIDField()
    status = serializers.CharField()
    expires_at = serializers.DateTimeField(allow_null=True)
    user_id = serializers.UUIDField(allow_null=True)
    invoice_id = serializers.UUIDField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class DeviceInfoSerializer(serializers.Serializer):
    """Machine description sent by client software on activation."""

    computer_id = serializers.CharField(max_length=255)
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    processor = serializers.CharField(required=False, allow_blank=True, max_length=255)
    os = serializers.CharField(required=False, allow_blank=True, max_length=255)
    ram = serializers.CharField(required=False, allow_blank=True, max_length=100)


class ActivateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for activate license request."""

    license_key = serializers.CharField(max_length=100)
    product_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    device = DeviceInfoSerializer()
