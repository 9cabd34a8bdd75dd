"""
Django implementation of PermissionRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from accounts.domain.permissions import MenuGrant
from accounts.infrastructure.models import RolePermission as RolePermissionModel
from accounts.ports.permission_repository import PermissionRepository


def grant_to_domain(model: RolePermissionModel) -> MenuGrant:
    """Convert a RolePermission row (menu select_related) to a MenuGrant."""
    return MenuGrant(
        menu=model.menu.name,
        can_view=model.can_view,
        can_create=model.can_create,
        can_edit=model.can_edit,
        can_delete=model.can_delete,
    )


class DjangoPermissionRepository(PermissionRepository):
    """Django ORM implementation of PermissionRepository."""

    def find_grant_sync(self, role_id: uuid.UUID, menu: str) -> Optional[MenuGrant]:
        """
        Synchronous lookup used by DRF permission classes, which run
        in the request thread.
        """
        model = (
            RolePermissionModel.objects.select_related("menu")
            .filter(role_id=role_id, menu__name=menu)
            .first()
        )
        return grant_to_domain(model) if model else None

    async def find_grant(self, role_id: uuid.UUID, menu: str) -> Optional[MenuGrant]:
        """Find the grant a role holds on a menu."""
        return await sync_to_async(self.find_grant_sync)(role_id, menu)

    @sync_to_async
    def find_grants_for_role(self, role_id: uuid.UUID) -> List[MenuGrant]:
        """List every grant a role holds, in menu order."""
        models = (
            RolePermissionModel.objects.select_related("menu")
            .filter(role_id=role_id)
            .order_by("menu__order", "menu__name")
        )
        return [grant_to_domain(model) for model in models]
