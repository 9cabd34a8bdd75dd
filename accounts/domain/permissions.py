"""
Role-based access rules.

A role holds one grant per menu with four flags. The role named
``Admin`` is allowed everything; every other role is denied unless a
grant for the menu sets the flag matching the action.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

ADMIN_ROLE = "Admin"


class PermissionAction(Enum):
    """Action a request performs on a menu's records."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"

    @classmethod
    def for_method(cls, method: str) -> "PermissionAction":
        """
        Map an HTTP method to the action it performs.

        Args:
            method: HTTP method name

        Returns:
            PermissionAction (unknown methods map to EDIT)
        """
        return _METHOD_ACTIONS.get(method.upper(), cls.EDIT)


_METHOD_ACTIONS = {
    "GET": PermissionAction.VIEW,
    "HEAD": PermissionAction.VIEW,
    "OPTIONS": PermissionAction.VIEW,
    "POST": PermissionAction.CREATE,
    "PUT": PermissionAction.EDIT,
    "PATCH": PermissionAction.EDIT,
    "DELETE": PermissionAction.DELETE,
}


@dataclass(frozen=True)
class MenuGrant:
    """Flags a role holds on one menu."""

    menu: str
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False

    def allows(self, action: PermissionAction) -> bool:
        return {
            PermissionAction.VIEW: self.can_view,
            PermissionAction.CREATE: self.can_create,
            PermissionAction.EDIT: self.can_edit,
            PermissionAction.DELETE: self.can_delete,
        }[action]


class AccessPolicy:
    """Domain service deciding whether a role may perform an action."""

    @staticmethod
    def is_allowed(
        role_name: str, grant: Optional[MenuGrant], action: PermissionAction
    ) -> bool:
        """
        Decide access. Deny by default.

        Args:
            role_name: Name of the acting user's role
            grant: The role's grant for the menu, if any
            action: Requested action

        Returns:
            True if the action is allowed
        """
        if role_name == ADMIN_ROLE:
            return True
        if grant is None:
            return False
        return grant.allows(action)
