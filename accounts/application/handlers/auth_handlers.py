"""
Authentication and authorization handlers.
"""
import logging
import uuid

from django.contrib.auth.hashers import check_password, make_password

from accounts.application.commands.login import (
    ChangePasswordCommand,
    GetUserRightsQuery,
    LoginCommand,
    RefreshTokenCommand,
)
from accounts.application.dto.auth_dto import (
    MenuGrantDTO,
    TokenPairDTO,
    UserDTO,
    UserRightsDTO,
)
from accounts.domain.permissions import ADMIN_ROLE
from accounts.domain.user import User
from accounts.ports.permission_repository import PermissionRepository
from accounts.ports.user_repository import UserRepository
from core.domain.exceptions import InvalidCredentialsError, InvalidTokenError, UserNotFoundError
from core.infrastructure.tokens import REFRESH_TOKEN, TokenService

logger = logging.getLogger(__name__)


def user_to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        name=user.name,
        email=str(user.email),
        role=user.role_name,
        company_id=user.company_id,
    )


def _issue_tokens(user: User, token_service: TokenService) -> TokenPairDTO:
    return TokenPairDTO(
        access_token=token_service.create_access_token(
            str(user.id), str(user.email), user.role_name or ""
        ),
        refresh_token=token_service.create_refresh_token(str(user.id)),
        expires_in=token_service.access_lifetime_seconds,
        user=user_to_dto(user),
    )


class LoginHandler:
    """Handler for LoginCommand."""

    def __init__(self, user_repository: UserRepository, token_service: TokenService = None):
        """Initialize handler with repositories."""
        self.user_repository = user_repository
        self.token_service = token_service or TokenService()

    async def handle(self, command: LoginCommand) -> TokenPairDTO:
        """
        Handle login command.

        Args:
            command: LoginCommand

        Returns:
            TokenPairDTO

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        user = await self.user_repository.find_by_email(command.email)
        if not user or not check_password(command.password, user.password_hash):
            logger.warning("Failed login for %s", command.email)
            raise InvalidCredentialsError()

        logger.info("User %s logged in", user.id)
        return _issue_tokens(user, self.token_service)


class RefreshTokenHandler:
    """Handler for RefreshTokenCommand."""

    def __init__(self, user_repository: UserRepository, token_service: TokenService = None):
        """Initialize handler with repositories."""
        self.user_repository = user_repository
        self.token_service = token_service or TokenService()

    async def handle(self, command: RefreshTokenCommand) -> TokenPairDTO:
        """
        Handle refresh command.

        Raises:
            InvalidTokenError: If the refresh token is invalid or its user is gone
        """
        claims = self.token_service.verify(command.refresh_token, expected_type=REFRESH_TOKEN)
        try:
            user_id = uuid.UUID(claims["sub"])
        except ValueError as e:
            raise InvalidTokenError("Invalid token subject") from e
        user = await self.user_repository.find_by_id(user_id)
        if not user:
            raise InvalidTokenError("Token subject no longer exists")
        return _issue_tokens(user, self.token_service)


class GetUserRightsHandler:
    """Handler for GetUserRightsQuery."""

    def __init__(
        self,
        user_repository: UserRepository,
        permission_repository: PermissionRepository,
    ):
        """Initialize handler with repositories."""
        self.user_repository = user_repository
        self.permission_repository = permission_repository

    async def handle(self, query: GetUserRightsQuery) -> UserRightsDTO:
        """
        Handle user rights query.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.user_repository.find_by_id(query.user_id)
        if not user:
            raise UserNotFoundError(f"User {query.user_id} not found")

        grants = await self.permission_repository.find_grants_for_role(user.role_id)
        return UserRightsDTO(
            user_id=user.id,
            role=user.role_name,
            is_admin=user.role_name == ADMIN_ROLE,
            grants=[
                MenuGrantDTO(
                    menu=grant.menu,
                    can_view=grant.can_view,
                    can_create=grant.can_create,
                    can_edit=grant.can_edit,
                    can_delete=grant.can_delete,
                )
                for grant in grants
            ],
        )


class ChangePasswordHandler:
    """Handler for ChangePasswordCommand."""

    def __init__(self, user_repository: UserRepository):
        """Initialize handler with repositories."""
        self.user_repository = user_repository

    async def handle(self, command: ChangePasswordCommand) -> None:
        """
        Handle change password command.

        The current password must be confirmed before the new one is stored.
        Tokens issued earlier stay valid until they expire.

        Raises:
            InvalidTokenError: If the signed-in user no longer exists
            InvalidCredentialsError: If the current password is wrong
        """
        user = await self.user_repository.find_by_id(command.user_id)
        if not user:
            raise InvalidTokenError("Token subject no longer exists")
        if not check_password(command.current_password, user.password_hash):
            logger.warning("Rejected password change for user %s", user.id)
            raise InvalidCredentialsError("Current password is incorrect")

        stored = await self.user_repository.set_password_hash(
            user.id, make_password(command.new_password)
        )
        if not stored:
            raise InvalidTokenError("Token subject no longer exists")
        logger.info("User %s changed their password", user.id)
