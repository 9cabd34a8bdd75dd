"""
Django admin configuration for accounts app.
"""
from django.contrib import admin

from accounts.infrastructure.models import ActivityLog, Menu, Role, RolePermission, User


class RolePermissionInline(admin.TabularInline):
    """Inline menu grants on the role page."""

    model = RolePermission
    extra = 0
    fields = ["menu", "can_view", "can_create", "can_edit", "can_delete"]


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    """Admin interface for Role model."""

    list_display = ["name", "description", "user_count"]
    search_fields = ["name"]
    inlines = [RolePermissionInline]

    def user_count(self, obj):
        """Display number of users holding this role."""
        return obj.users.count()

    user_count.short_description = "Users"


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    """Admin interface for Menu model."""

    list_display = ["name", "path", "parent", "order"]
    ordering = ["order"]


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin interface for dashboard users."""

    list_display = ["name", "email", "role", "company", "created_at"]
    list_filter = ["role", "company"]
    search_fields = ["name", "email"]
    readonly_fields = ["id", "password", "created_at", "updated_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("role", "company")


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    """Admin interface for ActivityLog model (read-only)."""

    list_display = ["created_at", "user", "action", "entity_type", "entity_name"]
    list_filter = ["action", "entity_type", "created_at"]
    search_fields = ["entity_name", "user__email"]
    readonly_fields = [
        "id",
        "user",
        "action",
        "entity_type",
        "entity_name",
        "details",
        "created_at",
    ]

    def has_add_permission(self, request):
        """Activity logs are append-only from the application."""
        return False

    def has_change_permission(self, request, obj=None):
        """Prevent editing activity logs."""
        return False
