"""
Serializers for user, role, menu, rights and activity log endpoints.
"""

from django.db import transaction
from rest_framework import serializers

from accounts.infrastructure.models import ActivityLog, Menu, Role, RolePermission, User
from billing.infrastructure.models import Company


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for dashboard users.

    The password is write-only and stored hashed; omitting it on update
    keeps the current one.
    """

    password = serializers.CharField(write_only=True, required=False, min_length=6)
    role_id = serializers.PrimaryKeyRelatedField(source="role", queryset=Role.objects.all())
    role = serializers.CharField(source="role.name", read_only=True)
    company_id = serializers.PrimaryKeyRelatedField(
        source="company",
        queryset=Company.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "password",
            "role_id",
            "role",
            "company_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_email(self, value):
        return value.strip().lower()

    def validate(self, attrs):
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": ["This field is required."]})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        for name, value in validated_data.items():
            setattr(instance, name, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class MenuGrantSerializer(serializers.Serializer):
    """Serializer for MenuGrantDTO."""

    menu = serializers.CharField()
    can_view = serializers.BooleanField()
    can_create = serializers.BooleanField()
    can_edit = serializers.BooleanField()
    can_delete = serializers.BooleanField()


class UserRightsSerializer(serializers.Serializer):
    """Serializer for UserRightsDTO."""

    user_id = serializers.UUIDField()
    role = serializers.CharField(allow_null=True)
    is_admin = serializers.BooleanField()
    grants = MenuGrantSerializer(many=True)


class ActivityLogSerializer(serializers.ModelSerializer):
    """Serializer for activity log entries; the acting user is taken from the request."""

    user_id = serializers.UUIDField(read_only=True)
    user_name = serializers.CharField(source="user.name", read_only=True, default=None)

    class Meta:
        model = ActivityLog
        fields = [
            "id",
            "user_id",
            "user_name",
            "action",
            "entity_type",
            "entity_name",
            "details",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]


class RoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Role
        fields = ["id", "name", "description", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class MenuSerializer(serializers.ModelSerializer):
    """Serializer for dashboard menus. A menu cannot be its own parent."""

    parent_id = serializers.PrimaryKeyRelatedField(
        source="parent",
        queryset=Menu.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Menu
        fields = ["id", "name", "path", "parent_id", "order"]
        read_only_fields = ["id"]

    def validate_parent_id(self, value):
        if value is not None and self.instance is not None and value.pk == self.instance.pk:
            raise serializers.ValidationError("A menu cannot be its own parent.")
        return value


class RolePermissionSerializer(serializers.ModelSerializer):
    """Serializer for the flags one role holds on one menu."""

    role_id = serializers.PrimaryKeyRelatedField(source="role", queryset=Role.objects.all())
    role = serializers.CharField(source="role.name", read_only=True)
    menu_id = serializers.PrimaryKeyRelatedField(source="menu", queryset=Menu.objects.all())
    menu = serializers.CharField(source="menu.name", read_only=True)

    class Meta:
        model = RolePermission
        fields = [
            "id",
            "role_id",
            "role",
            "menu_id",
            "menu",
            "can_view",
            "can_create",
            "can_edit",
            "can_delete",
        ]
        read_only_fields = ["id"]


class MenuFlagsSerializer(serializers.Serializer):
    """One entry of a bulk grant request."""

    menu_id = serializers.PrimaryKeyRelatedField(queryset=Menu.objects.all())
    can_view = serializers.BooleanField(default=False)
    can_create = serializers.BooleanField(default=False)
    can_edit = serializers.BooleanField(default=False)
    can_delete = serializers.BooleanField(default=False)


class BulkRolePermissionSerializer(serializers.Serializer):
    """
    Set a role's flags on several menus at once.

    Each entry creates the role's grant for that menu or overwrites the
    existing one. Menus not listed keep their grants. All entries are
    written in one transaction.
    """

    role_id = serializers.PrimaryKeyRelatedField(queryset=Role.objects.all())
    permissions = MenuFlagsSerializer(many=True, allow_empty=False)

    def validate_permissions(self, value):
        menu_ids = [entry["menu_id"].pk for entry in value]
        if len(menu_ids) != len(set(menu_ids)):
            raise serializers.ValidationError("Each menu may appear only once.")
        return value

    def create(self, validated_data):
        role = validated_data["role_id"]
        saved = []
        with transaction.atomic():
            for entry in validated_data["permissions"]:
                flags = {name: value for name, value in entry.items() if name != "menu_id"}
                grant, _ = RolePermission.objects.update_or_create(
                    role=role, menu=entry["menu_id"], defaults=flags
                )
                saved.append(grant)
        return saved
