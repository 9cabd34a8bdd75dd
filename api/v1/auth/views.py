"""
Authentication API views.

Login and refresh are public; they hand out the bearer tokens every
other dashboard endpoint requires.
"""

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.commands.login import (
    ChangePasswordCommand,
    LoginCommand,
    RefreshTokenCommand,
)
from accounts.application.handlers.auth_handlers import (
    ChangePasswordHandler,
    LoginHandler,
    RefreshTokenHandler,
    user_to_dto,
)
from accounts.infrastructure.repositories.django_user_repository import DjangoUserRepository
from api.permissions import MenuPermission, get_principal
from api.v1.auth.serializers import (
    ChangePasswordSerializer,
    LoginRequestSerializer,
    RefreshRequestSerializer,
    TokenPairSerializer,
    UserDTOSerializer,
)
from core.domain.exceptions import UserNotFoundError
from core.instrumentation import Status, StatusCode, get_tracer

_user_repo = DjangoUserRepository()

tracer = get_tracer(__name__)


def _invalid(serializer, message: str) -> Response:
    return Response(
        {"error": {"code": "VALIDATION_ERROR", "message": message, "details": serializer.errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )


class LoginView(APIView):
    """Exchange email and password for a token pair."""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_login)(request)

    async def _handle_login(self, request: Request) -> Response:
        with tracer.start_as_current_span("login") as span:
            serializer = LoginRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _invalid(serializer, "Email and password are required")

            handler = LoginHandler(user_repository=_user_repo)
            result = await handler.handle(
                LoginCommand(
                    email=serializer.validated_data["email"],
                    password=serializer.validated_data["password"],
                )
            )

            span.set_attribute("user.id", str(result.user.id))
            span.set_status(Status(StatusCode.OK))
            return Response(TokenPairSerializer(result).data)


class RefreshView(APIView):
    """Exchange a refresh token for a new token pair."""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_refresh)(request)

    async def _handle_refresh(self, request: Request) -> Response:
        with tracer.start_as_current_span("refresh_token") as span:
            serializer = RefreshRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _invalid(serializer, "Refresh token is required")

            handler = RefreshTokenHandler(user_repository=_user_repo)
            result = await handler.handle(
                RefreshTokenCommand(refresh_token=serializer.validated_data["refresh_token"])
            )

            span.set_status(Status(StatusCode.OK))
            return Response(TokenPairSerializer(result).data)


class MeView(APIView):
    """The authenticated user."""

    permission_classes = [MenuPermission]

    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_me)(request)

    async def _handle_me(self, request: Request) -> Response:
        principal = get_principal(request)
        user = await _user_repo.find_by_id(principal.user_id)
        if not user:
            raise UserNotFoundError(f"User {principal.user_id} not found")
        return Response(UserDTOSerializer(user_to_dto(user)).data)


class ChangePasswordView(APIView):
    """Replace the authenticated user's password."""

    permission_classes = [MenuPermission]

    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_change_password)(request)

    async def _handle_change_password(self, request: Request) -> Response:
        with tracer.start_as_current_span("change_password") as span:
            serializer = ChangePasswordSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return _invalid(serializer, "Current password and new password are required")

            principal = get_principal(request)
            span.set_attribute("user.id", str(principal.user_id))
            handler = ChangePasswordHandler(user_repository=_user_repo)
            await handler.handle(
                ChangePasswordCommand(
                    user_id=principal.user_id,
                    current_password=serializer.validated_data["current_password"],
                    new_password=serializer.validated_data["new_password"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"message": "Password changed successfully"})
