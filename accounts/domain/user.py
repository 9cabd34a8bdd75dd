"""
User domain entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import Email


@dataclass(frozen=True)
class User:
    """
    A dashboard user. Belongs to a role and optionally to a company.

    ``password_hash`` is an encoded Django password hash, never a raw password.
    """

    id: uuid.UUID
    name: str
    email: Email
    password_hash: str
    role_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    role_name: Optional[str] = None
    company_id: Optional[uuid.UUID] = None

    def __post_init__(self):
        """Validate user entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("User name cannot be empty")
        if not self.role_id:
            raise ValueError("Role ID is required")
