"""
Role permission repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from accounts.domain.permissions import MenuGrant


class PermissionRepository(ABC):
    """Abstract repository for per-menu role grants."""

    @abstractmethod
    async def find_grant(self, role_id: uuid.UUID, menu: str) -> Optional[MenuGrant]:
        """
        Find the grant a role holds on a menu.

        Args:
            role_id: Role UUID
            menu: Menu name

        Returns:
            MenuGrant or None if the role has no grant for the menu
        """
        pass

    @abstractmethod
    async def find_grants_for_role(self, role_id: uuid.UUID) -> List[MenuGrant]:
        """
        List every grant a role holds, in menu order.

        Args:
            role_id: Role UUID

        Returns:
            List of MenuGrant
        """
        pass
