"""
Django implementation of UserRepository port.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async
from django.utils import timezone

from accounts.domain.user import User
from accounts.infrastructure.models import User as UserModel
from accounts.ports.user_repository import UserRepository
from core.domain.value_objects import Email


class DjangoUserRepository(UserRepository):
    """Django ORM implementation of UserRepository."""

    def _to_domain(self, model: UserModel) -> User:
        """
        Convert Django model to domain entity.

        Args:
            model: Django User model (role should be select_related)

        Returns:
            User domain entity
        """
        return User(
            id=model.id,
            name=model.name,
            email=Email(model.email),
            password_hash=model.password,
            role_id=model.role_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
            role_name=model.role.name,
            company_id=model.company_id,
        )

    def _queryset(self):
        return UserModel.objects.select_related("role")

    @sync_to_async
    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Find a user by ID."""
        model = self._queryset().filter(id=user_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by email address (case-insensitive)."""
        model = self._queryset().filter(email__iexact=email.strip()).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_first_by_company(self, company_id: uuid.UUID) -> Optional[User]:
        """Find the earliest-created user of a company."""
        model = self._queryset().filter(company_id=company_id).order_by("created_at").first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def set_password_hash(self, user_id: uuid.UUID, password_hash: str) -> bool:
        """Store a new encoded password; only the password column is written."""
        updated = UserModel.objects.filter(id=user_id).update(
            password=password_hash, updated_at=timezone.now()
        )
        return updated > 0
