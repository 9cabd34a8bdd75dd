"""
User, role, menu, rights and activity log API views.
"""

import logging

from asgiref.sync import async_to_sync
from rest_framework import generics, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.commands.login import GetUserRightsQuery
from accounts.application.handlers.auth_handlers import GetUserRightsHandler
from accounts.domain.activity import ActivityEntry
from accounts.infrastructure.models import ActivityLog, Menu, Role, RolePermission, User
from accounts.infrastructure.repositories.django_activity_log_repository import record_activity
from accounts.infrastructure.repositories.django_permission_repository import (
    DjangoPermissionRepository,
)
from accounts.infrastructure.repositories.django_user_repository import DjangoUserRepository
from api.mixins import ActivityLoggedMixin
from api.permissions import MenuPermission, get_actor_id
from api.v1.accounts.serializers import (
    ActivityLogSerializer,
    BulkRolePermissionSerializer,
    MenuSerializer,
    RolePermissionSerializer,
    RoleSerializer,
    UserRightsSerializer,
    UserSerializer,
)
from core.domain.value_objects import ActivityAction, EntityType

logger = logging.getLogger(__name__)

_user_repo = DjangoUserRepository()
_permission_repo = DjangoPermissionRepository()


class UserListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List users, optionally filtered by ``?email=``, and create users."""

    rbac_menu = "Users"
    activity_entity_type = EntityType.USER
    serializer_class = UserSerializer

    def get_queryset(self):
        queryset = User.objects.select_related("role")
        email = self.request.query_params.get("email")
        if email:
            queryset = queryset.filter(email__iexact=email.strip())
        return queryset

    def activity_name(self, instance) -> str:
        return instance.name


class UserDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update and delete one user."""

    rbac_menu = "Users"
    activity_entity_type = EntityType.USER
    queryset = User.objects.select_related("role")
    serializer_class = UserSerializer

    def activity_name(self, instance) -> str:
        return instance.name


class UserRightsView(APIView):
    """Menu grants a user holds through their role."""

    permission_classes = [MenuPermission]
    rbac_menu = "Users"

    def get(self, request: Request, user_id) -> Response:
        return async_to_sync(self._handle_get_rights)(user_id)

    async def _handle_get_rights(self, user_id) -> Response:
        handler = GetUserRightsHandler(
            user_repository=_user_repo, permission_repository=_permission_repo
        )
        result = await handler.handle(GetUserRightsQuery(user_id=user_id))
        return Response(UserRightsSerializer(result).data)


class RoleListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    rbac_menu = "Roles"
    activity_entity_type = EntityType.ROLE
    queryset = Role.objects.all()
    serializer_class = RoleSerializer

    def activity_name(self, instance) -> str:
        return instance.name


class RoleDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update and delete one role. Roles still held by users cannot be deleted."""

    rbac_menu = "Roles"
    activity_entity_type = EntityType.ROLE
    queryset = Role.objects.all()
    serializer_class = RoleSerializer

    def activity_name(self, instance) -> str:
        return instance.name


class MenuListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List menus in display order and create menus."""

    rbac_menu = "Roles"
    activity_entity_type = EntityType.MENU
    queryset = Menu.objects.all()
    serializer_class = MenuSerializer

    def activity_name(self, instance) -> str:
        return instance.name


class MenuDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    rbac_menu = "Roles"
    activity_entity_type = EntityType.MENU
    queryset = Menu.objects.all()
    serializer_class = MenuSerializer

    def activity_name(self, instance) -> str:
        return instance.name


class RolePermissionListView(ActivityLoggedMixin, generics.ListCreateAPIView):
    """List grants, or only one role's grants under the role URL, and create grants."""

    rbac_menu = "Roles"
    activity_entity_type = EntityType.ROLE_PERMISSION
    serializer_class = RolePermissionSerializer

    def get_queryset(self):
        queryset = RolePermission.objects.select_related("role", "menu")
        role_id = self.kwargs.get("role_id")
        if role_id:
            queryset = queryset.filter(role_id=role_id)
        return queryset


class RolePermissionDetailView(ActivityLoggedMixin, generics.RetrieveUpdateDestroyAPIView):
    rbac_menu = "Roles"
    activity_entity_type = EntityType.ROLE_PERMISSION
    queryset = RolePermission.objects.select_related("role", "menu")
    serializer_class = RolePermissionSerializer


class RolePermissionBulkView(APIView):
    """Create or overwrite a role's grants on several menus in one request."""

    permission_classes = [MenuPermission]
    rbac_menu = "Roles"

    def post(self, request: Request) -> Response:
        serializer = BulkRolePermissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        grants = serializer.save()

        role = serializer.validated_data["role_id"]
        record_activity(
            ActivityEntry(
                action=ActivityAction.UPDATE,
                entity_type=EntityType.ROLE_PERMISSION,
                entity_name=role.name,
                actor_id=get_actor_id(request),
                details={"menus": [grant.menu.name for grant in grants]},
            )
        )
        logger.info("Set %s grants for role %s", len(grants), role.name)
        return Response(
            {
                "message": f"Updated {len(grants)} permissions for role {role.name}",
                "updated_permissions": RolePermissionSerializer(grants, many=True).data,
            }
        )


class ActivityLogListView(generics.ListCreateAPIView):
    """List activity log entries and record one manually."""

    permission_classes = [MenuPermission]
    rbac_menu = "Activity"
    serializer_class = ActivityLogSerializer

    def get_queryset(self):
        queryset = ActivityLog.objects.select_related("user")
        entity_type = self.request.query_params.get("entity_type")
        if entity_type:
            queryset = queryset.filter(entity_type=entity_type)
        return queryset

    def perform_create(self, serializer):
        serializer.save(user_id=get_actor_id(self.request))


class ActivityLogDetailView(generics.RetrieveDestroyAPIView):
    """Retrieve and delete one activity log entry."""

    permission_classes = [MenuPermission]
    rbac_menu = "Activity"
    queryset = ActivityLog.objects.select_related("user")
    serializer_class = ActivityLogSerializer


class ActivityLogClearView(APIView):
    """Delete every activity log entry."""

    permission_classes = [MenuPermission]
    rbac_menu = "Activity"

    def delete(self, request: Request) -> Response:
        deleted, _ = ActivityLog.objects.all().delete()
        logger.info(
            "Cleared %s activity log entries",
            deleted,
            extra={"user_id": str(get_actor_id(request))},
        )
        return Response({"deleted": deleted}, status=status.HTTP_200_OK)
