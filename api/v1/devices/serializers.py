"""
Serializers for device API endpoints.
"""

from rest_framework import serializers

from devices.domain.services import ActivationPolicy
from devices.infrastructure.models import Device
from licenses.infrastructure.models import License


class DeviceSerializer(serializers.ModelSerializer):
    """Serializer for devices managed from the dashboard."""

    license_id = serializers.PrimaryKeyRelatedField(
        source="license", queryset=License.objects.all()
    )

    class Meta:
        model = Device
        fields = [
            "id",
            "license_id",
            "computer_id",
            "name",
            "processor",
            "os",
            "ram",
            "is_active",
            "activated_at",
            "last_seen_at",
        ]
        read_only_fields = ["id", "activated_at", "last_seen_at"]

    def validate(self, attrs):
        license = attrs.get("license", getattr(self.instance, "license", None))
        is_active = attrs.get("is_active", getattr(self.instance, "is_active", True))
        was_active = bool(self.instance and self.instance.is_active)
        if license is not None and is_active and not was_active:
            active = Device.objects.filter(license=license, is_active=True).count()
            if not ActivationPolicy.has_free_slot(active, license.plan.device_limit):
                raise serializers.ValidationError(
                    {"is_active": ["The license has no free device slot."]}
                )
        return attrs


class DeviceDTOSerializer(serializers.Serializer):
    """Serializer for DeviceDTO."""

    id = serializers.UUIDField()
    license_id = serializers.UUIDField()
    computer_id = serializers.CharField()
    name = serializers.CharField(allow_null=True)
    processor = serializers.CharField(allow_null=True)
    os = serializers.CharField(allow_null=True)
    ram = serializers.CharField(allow_null=True)
    is_active = serializers.BooleanField()
    activated_at = serializers.DateTimeField()
    last_seen_at = serializers.DateTimeField()


class HeartbeatRequestSerializer(serializers.Serializer):
    """Serializer for heartbeat request."""

    license_key = serializers.CharField(max_length=100)
    computer_id = serializers.CharField(max_length=255)
