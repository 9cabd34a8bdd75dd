"""
Authenticated principal.
"""
import uuid
from dataclasses import dataclass

from accounts.domain.permissions import ADMIN_ROLE


@dataclass(frozen=True)
class Principal:
    """The user a request acts on behalf of, as resolved from a bearer token."""

    user_id: uuid.UUID
    email: str
    role_id: uuid.UUID
    role_name: str

    @property
    def is_admin(self) -> bool:
        return self.role_name == ADMIN_ROLE
