"""
Bearer token authentication middleware.

This middleware validates the JWT access token on dashboard API
requests and attaches the acting user as ``request.principal``.
Licensed clients call the public activation and heartbeat endpoints
with their license key instead.
"""

import logging
import uuid
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from accounts.domain.principal import Principal
from accounts.infrastructure.models import User as UserModel
from core.domain.exceptions import InvalidTokenError
from core.infrastructure.tokens import ACCESS_TOKEN, TokenService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/"

PUBLIC_API_PATHS = (
    "/api/v1/auth/login/",
    "/api/v1/auth/refresh/",
    "/api/v1/licenses/activate/",
    "/api/v1/devices/heartbeat/",
)


def _error(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)


class BearerTokenAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for bearer token authentication.

    This middleware:
    1. Leaves non-API paths (admin, health checks, metrics) alone
    2. Lets the public API paths through without a token
    3. Resolves the token to a Principal, reloading the user so role
       changes apply immediately
    4. Returns 401 Unauthorized if authentication fails
    """

    token_service_class = TokenService

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        request.principal = None  # type: ignore

        if self._should_skip_auth(request.path):
            return None

        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return _error(
                "AUTHENTICATION_REQUIRED",
                "Missing bearer token. Provide an Authorization: Bearer header.",
                401,
            )

        try:
            principal = self._resolve(token.strip())
        except InvalidTokenError as e:
            logger.warning("Rejected bearer token on %s: %s", request.path, e.message)
            return _error(e.code, e.message, 401)

        request.principal = principal  # type: ignore
        return None

    def _should_skip_auth(self, path: str) -> bool:
        """
        Check if authentication should be skipped for this path.

        Args:
            path: Request path

        Returns:
            True if auth should be skipped
        """
        if not path.startswith(API_PREFIX):
            return True
        normalized = path if path.endswith("/") else path + "/"
        return normalized in PUBLIC_API_PATHS

    def _resolve(self, token: str) -> Principal:
        claims = self.token_service_class().verify(token, expected_type=ACCESS_TOKEN)
        try:
            user_id = uuid.UUID(claims["sub"])
        except ValueError as e:
            raise InvalidTokenError("Invalid token subject") from e

        user = UserModel.objects.select_related("role").filter(id=user_id).first()
        if not user:
            raise InvalidTokenError("Token subject no longer exists")

        return Principal(
            user_id=user.id,
            email=user.email,
            role_id=user.role_id,
            role_name=user.role.name,
        )
