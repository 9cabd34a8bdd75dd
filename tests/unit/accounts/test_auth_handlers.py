"""
Unit tests for login, refresh and user rights handlers.
"""

import uuid
from dataclasses import replace
from datetime import timedelta

import pytest
from django.contrib.auth.hashers import check_password, make_password

from accounts.application.commands.login import (
    ChangePasswordCommand,
    GetUserRightsQuery,
    LoginCommand,
    RefreshTokenCommand,
)
from accounts.application.handlers.auth_handlers import (
    ChangePasswordHandler,
    GetUserRightsHandler,
    LoginHandler,
    RefreshTokenHandler,
)
from accounts.domain.permissions import MenuGrant
from core.domain.exceptions import InvalidCredentialsError, InvalidTokenError, UserNotFoundError
from core.infrastructure.tokens import REFRESH_TOKEN, TokenService


@pytest.fixture
def token_service():
    return TokenService(
        secret="auth-handler-secret-with-enough-length-for-hs256",
        algorithm="HS256",
        access_lifetime=timedelta(minutes=15),
        refresh_lifetime=timedelta(days=7),
    )


@pytest.fixture
def user(company_user):
    return replace(company_user, password_hash=make_password("s3cret!"))


@pytest.fixture
def users(user_repository, user):
    user_repository.users = [user]
    return user_repository


@pytest.mark.asyncio
class TestLoginHandler:
    """Tests for LoginHandler."""

    async def test_login(self, users, user, token_service):
        """Test valid credentials return a verifiable token pair."""
        handler = LoginHandler(users, token_service)

        result = await handler.handle(LoginCommand(email="Jane@Acme.test ", password="s3cret!"))

        assert result.token_type == "Bearer"
        assert result.expires_in == 900
        assert result.user.id == user.id
        assert result.user.role == "User"
        assert token_service.verify(result.access_token)["sub"] == str(user.id)

    async def test_wrong_password(self, users, token_service):
        with pytest.raises(InvalidCredentialsError):
            await LoginHandler(users, token_service).handle(
                LoginCommand(email="jane@acme.test", password="wrong")
            )

    async def test_unknown_email(self, users, token_service):
        with pytest.raises(InvalidCredentialsError):
            await LoginHandler(users, token_service).handle(
                LoginCommand(email="nobody@acme.test", password="s3cret!")
            )


@pytest.mark.asyncio
class TestRefreshTokenHandler:
    """Tests for RefreshTokenHandler."""

    async def test_refresh(self, users, user, token_service):
        refresh = token_service.create_refresh_token(str(user.id))

        result = await RefreshTokenHandler(users, token_service).handle(
            RefreshTokenCommand(refresh_token=refresh)
        )

        claims = token_service.verify(result.refresh_token, expected_type=REFRESH_TOKEN)
        assert claims["sub"] == str(user.id)

    async def test_access_token_cannot_refresh(self, users, user, token_service):
        access = token_service.create_access_token(str(user.id), "jane@acme.test", "User")

        with pytest.raises(InvalidTokenError):
            await RefreshTokenHandler(users, token_service).handle(
                RefreshTokenCommand(refresh_token=access)
            )

    async def test_deleted_user(self, users, token_service):
        refresh = token_service.create_refresh_token(str(uuid.uuid4()))

        with pytest.raises(InvalidTokenError):
            await RefreshTokenHandler(users, token_service).handle(
                RefreshTokenCommand(refresh_token=refresh)
            )


@pytest.mark.asyncio
class TestGetUserRightsHandler:
    """Tests for GetUserRightsHandler."""

    async def test_rights_of_role(self, users, user, permission_repository):
        permission_repository.grants[user.role_id] = [
            MenuGrant(menu="Licenses", can_view=True, can_edit=True)
        ]

        result = await GetUserRightsHandler(users, permission_repository).handle(
            GetUserRightsQuery(user_id=user.id)
        )

        assert not result.is_admin
        assert [(g.menu, g.can_view, g.can_edit, g.can_delete) for g in result.grants] == [
            ("Licenses", True, True, False)
        ]

    async def test_unknown_user(self, users, permission_repository):
        with pytest.raises(UserNotFoundError):
            await GetUserRightsHandler(users, permission_repository).handle(
                GetUserRightsQuery(user_id=uuid.uuid4())
            )


@pytest.mark.asyncio
class TestChangePasswordHandler:
    """Tests for ChangePasswordHandler."""

    async def test_change_password(self, users, user, token_service):
        """Test the new password logs in and the old one no longer does."""
        await ChangePasswordHandler(users).handle(
            ChangePasswordCommand(
                user_id=user.id, current_password="s3cret!", new_password="n3w-s3cret"
            )
        )

        stored = await users.find_by_id(user.id)
        assert check_password("n3w-s3cret", stored.password_hash)
        login = LoginHandler(users, token_service)
        result = await login.handle(LoginCommand(email="jane@acme.test", password="n3w-s3cret"))
        assert result.user.id == user.id
        with pytest.raises(InvalidCredentialsError):
            await login.handle(LoginCommand(email="jane@acme.test", password="s3cret!"))

    async def test_wrong_current_password(self, users, user):
        with pytest.raises(InvalidCredentialsError, match="Current password is incorrect"):
            await ChangePasswordHandler(users).handle(
                ChangePasswordCommand(
                    user_id=user.id, current_password="guess", new_password="n3w-s3cret"
                )
            )

        stored = await users.find_by_id(user.id)
        assert check_password("s3cret!", stored.password_hash)

    async def test_deleted_user(self, users):
        with pytest.raises(InvalidTokenError):
            await ChangePasswordHandler(users).handle(
                ChangePasswordCommand(
                    user_id=uuid.uuid4(), current_password="s3cret!", new_password="n3w-s3cret"
                )
            )
