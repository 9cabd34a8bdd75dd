"""
Role, Menu, RolePermission, User and ActivityLog models.
"""
import uuid

from django.contrib.auth.hashers import check_password, make_password
from django.db import models


class Role(models.Model):
    """
    A named set of permissions (Admin, Manager, User, ...).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "roles"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Menu(models.Model):
    """
    A dashboard section. Permissions are granted per menu.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    path = models.CharField(max_length=255, unique=True)
    parent = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="children"
    )
    order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "menus"
        ordering = ["order", "name"]

    def __str__(self):
        return self.name


class RolePermission(models.Model):
    """
    Flags a role holds on one menu.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="permissions")
    menu = models.ForeignKey(Menu, on_delete=models.CASCADE, related_name="permissions")
    can_view = models.BooleanField(default=False)
    can_create = models.BooleanField(default=False)
    can_edit = models.BooleanField(default=False)
    can_delete = models.BooleanField(default=False)

    class Meta:
        db_table = "role_permissions"
        unique_together = [["role", "menu"]]
        ordering = ["role", "menu__order"]

    def __str__(self):
        return f"{self.role.name} @ {self.menu.name}"


class User(models.Model):
    """
    A dashboard user. Separate from django.contrib.auth users, which are
    only used for the Django admin site.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=255, help_text="Encoded password hash")
    role = models.ForeignKey(Role, on_delete=models.PROTECT, related_name="users")
    company = models.ForeignKey(
        "billing.Company",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["company", "created_at"]),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def set_password(self, raw_password: str) -> None:
        """Hash and store a raw password."""
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        """
        Verify a raw password against the stored hash.

        Args:
            raw_password: Password as typed

        Returns:
            True if the password matches
        """
        return check_password(raw_password, self.password)


class ActivityLog(models.Model):
    """
    Append-only trail of changes. ``user`` is empty for system actions
    such as expiry corrections.
    """

    ACTION_CHOICES = [
        ("create", "Create"),
        ("update", "Update"),
        ("delete", "Delete"),
    ]

    ENTITY_TYPE_CHOICES = [
        ("Product", "Product"),
        ("Plan", "Plan"),
        ("License", "License"),
        ("User", "User"),
        ("Company", "Company"),
        ("Invoice", "Invoice"),
        ("Device", "Device"),
        ("Bank", "Bank"),
        ("Role", "Role"),
        ("Menu", "Menu"),
        ("RolePermission", "Role permission"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs",
    )
    action = models.CharField(max_length=10, choices=ACTION_CHOICES)
    entity_type = models.CharField(max_length=20, choices=ENTITY_TYPE_CHOICES)
    entity_name = models.CharField(max_length=255)
    details = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "activity_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "created_at"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return f"{self.action} {self.entity_type} {self.entity_name}"
