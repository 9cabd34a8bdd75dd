"""
User repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from accounts.domain.user import User


class UserRepository(ABC):
    """Abstract repository for User entities."""

    @abstractmethod
    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """
        Find a user by ID.

        Args:
            user_id: User UUID

        Returns:
            User entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """
        Find a user by email address (case-insensitive).

        Args:
            email: Email address

        Returns:
            User entity or None if not found
        """
        pass

    @abstractmethod
    async def find_first_by_company(self, company_id: uuid.UUID) -> Optional[User]:
        """
        Find the earliest-created user of a company.

        Args:
            company_id: Company UUID

        Returns:
            User entity or None if the company has no users
        """
        pass

    @abstractmethod
    async def set_password_hash(self, user_id: uuid.UUID, password_hash: str) -> bool:
        """
        Store a new encoded password for a user.

        Args:
            user_id: User UUID
            password_hash: Encoded Django password hash

        Returns:
            True if the user exists and was updated
        """
        pass
