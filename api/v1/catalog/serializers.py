"""
Serializers for product and plan endpoints.
"""

from rest_framework import serializers

from catalog.infrastructure.models import Plan, Product


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for products."""

    class Meta:
        model = Product
        fields = ["id", "name", "description", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Product name cannot be empty")
        return value.strip()


class PlanSerializer(serializers.ModelSerializer):
    """Serializer for plans; ``duration_days`` 0 means permanent licenses."""

    product_id = serializers.PrimaryKeyRelatedField(
        source="product", queryset=Product.objects.all()
    )

    class Meta:
        model = Plan
        fields = [
            "id",
            "product_id",
            "name",
            "price",
            "device_limit",
            "duration_days",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_device_limit(self, value):
        if value < 1:
            raise serializers.ValidationError("Device limit must be at least 1")
        return value
