"""
JWT token service.

Issues and verifies the bearer tokens used by the dashboard API.
Access tokens authenticate requests; refresh tokens can only be
exchanged for a new token pair.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from django.conf import settings

from core.domain.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenService:
    """Creates and verifies signed JWTs."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_lifetime: Optional[timedelta] = None,
        refresh_lifetime: Optional[timedelta] = None,
    ):
        self.secret = secret or settings.JWT_SECRET
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.access_lifetime = access_lifetime or timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_MINUTES
        )
        self.refresh_lifetime = refresh_lifetime or timedelta(
            days=settings.JWT_REFRESH_TOKEN_DAYS
        )

    def _encode(self, claims: Dict[str, Any], token_type: str, lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload.update({"exp": now + lifetime, "iat": now, "type": token_type})
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def create_access_token(self, user_id: str, email: str, role: str) -> str:
        """
        Create an access token.

        Args:
            user_id: Subject user UUID as string
            email: User email
            role: Role name at issue time

        Returns:
            Encoded JWT
        """
        return self._encode(
            {"sub": user_id, "email": email, "role": role}, ACCESS_TOKEN, self.access_lifetime
        )

    def create_refresh_token(self, user_id: str) -> str:
        """Create a refresh token for a user."""
        return self._encode({"sub": user_id}, REFRESH_TOKEN, self.refresh_lifetime)

    def verify(self, token: str, expected_type: str = ACCESS_TOKEN) -> Dict[str, Any]:
        """
        Verify and decode a token.

        Args:
            token: Encoded JWT
            expected_type: "access" or "refresh"

        Returns:
            Decoded claims

        Raises:
            InvalidTokenError: If the token is expired, tampered or of the wrong type
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected token: %s", e)
            raise InvalidTokenError("Invalid token") from e

        if payload.get("type") != expected_type:
            raise InvalidTokenError(f"Expected an {expected_type} token")
        return payload

    @property
    def access_lifetime_seconds(self) -> int:
        return int(self.access_lifetime.total_seconds())
