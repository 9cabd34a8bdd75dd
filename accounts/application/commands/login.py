"""
Authentication commands.
"""
import uuid
from dataclasses import dataclass


@dataclass
class LoginCommand:
    """Command to exchange email and password for a token pair."""

    email: str
    password: str


@dataclass
class RefreshTokenCommand:
    """Command to exchange a refresh token for a new token pair."""

    refresh_token: str


@dataclass
class GetUserRightsQuery:
    """Query for the menu grants a user holds through their role."""

    user_id: uuid.UUID


@dataclass
class ChangePasswordCommand:
    """Command for a signed-in user to replace their own password."""

    user_id: uuid.UUID
    current_password: str
    new_password: str
