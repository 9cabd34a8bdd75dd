"""
Account DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class UserDTO:
    """DTO for the authenticated user."""

    id: uuid.UUID
    name: str
    email: str
    role: Optional[str]
    company_id: Optional[uuid.UUID]


@dataclass
class TokenPairDTO:
    """DTO for issued tokens."""

    access_token: str
    refresh_token: str
    expires_in: int
    user: UserDTO
    token_type: str = "Bearer"


@dataclass
class MenuGrantDTO:
    """DTO for one menu grant."""

    menu: str
    can_view: bool
    can_create: bool
    can_edit: bool
    can_delete: bool


@dataclass
class UserRightsDTO:
    """DTO for the rights of a user."""

    user_id: uuid.UUID
    role: Optional[str]
    is_admin: bool
    grants: List[MenuGrantDTO] = field(default_factory=list)
