"""
Role-based access control for dashboard API views.

Views name the dashboard menu they belong to in ``rbac_menu``. The
HTTP method selects which flag of the role's grant for that menu is
required.
"""

import logging

from rest_framework.permissions import BasePermission

from accounts.domain.permissions import AccessPolicy, PermissionAction
from accounts.infrastructure.repositories.django_permission_repository import (
    DjangoPermissionRepository,
)

logger = logging.getLogger(__name__)


def get_principal(request):
    """Return the Principal set by the bearer token middleware, or None."""
    return getattr(request, "principal", None)


def get_actor_id(request):
    principal = get_principal(request)
    return principal.user_id if principal else None


class MenuPermission(BasePermission):
    """
    Allow a request if the acting role may perform the method's action on the view's menu.

    Views without ``rbac_menu`` only require an authenticated principal.
    """

    message = "You do not have permission to perform this action."
    permission_repository_class = DjangoPermissionRepository

    def has_permission(self, request, view) -> bool:
        principal = get_principal(request)
        if principal is None:
            return False

        menu = getattr(view, "rbac_menu", None)
        if menu is None or principal.is_admin:
            return True

        action = PermissionAction.for_method(request.method)
        grant = self.permission_repository_class().find_grant_sync(principal.role_id, menu)
        allowed = AccessPolicy.is_allowed(principal.role_name, grant, action)
        if not allowed:
            logger.warning(
                "Denied %s on %s for role %s",
                action.value,
                menu,
                principal.role_name,
                extra={"user_id": str(principal.user_id)},
            )
        return allowed
