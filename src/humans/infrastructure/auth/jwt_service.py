"""JWT token service.

Issues and validates the access and refresh tokens that carry a user's
identity. Refresh tokens are stateless: a valid, unexpired refresh token
is enough to obtain a new token pair.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import jwt

from humans.core.config import get_settings


class JWTError(Exception):
    """Base exception for JWT-related errors."""


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""


class InvalidTokenError(JWTError):
    """Raised when a token is malformed, badly signed or of the wrong type."""


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a validated token."""

    user_id: str
    email: str
    token_type: TokenType
    expires_at: datetime


class JWTService:
    """Signs and checks humans.inc tokens with a shared secret."""

    ALGORITHM = "HS256"
    ISSUER = "humans.inc"

    def __init__(self, secret_key: str | None = None) -> None:
        self._secret_key = secret_key

    @property
    def secret_key(self) -> str:
        return self._secret_key or get_settings().secret_key

    @staticmethod
    def default_lifetime(token_type: TokenType) -> timedelta:
        settings = get_settings()
        if token_type is TokenType.REFRESH:
            return timedelta(days=settings.refresh_token_expire_days)
        return timedelta(minutes=settings.access_token_expire_minutes)

    def _issue(
        self,
        token_type: TokenType,
        user_id: str,
        email: str,
        expires_delta: timedelta | None,
    ) -> str:
        now = datetime.now(timezone.utc)
        lifetime = expires_delta if expires_delta is not None else self.default_lifetime(token_type)
        payload: dict[str, Any] = {
            "iss": self.ISSUER,
            "sub": user_id,
            "iat": now,
            "exp": now + lifetime,
            "email": email,
            "type": token_type.value,
        }
        if token_type is TokenType.REFRESH:
            # jti keeps every refresh token distinct
            payload["jti"] = uuid.uuid4().hex
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def create_access_token(
        self, user_id: str, email: str, expires_delta: timedelta | None = None
    ) -> str:
        """Create a short-lived access token for API calls."""
        return self._issue(TokenType.ACCESS, user_id, email, expires_delta)

    def create_refresh_token(
        self, user_id: str, email: str, expires_delta: timedelta | None = None
    ) -> str:
        """Create a long-lived token that can only be exchanged for a new pair."""
        return self._issue(TokenType.REFRESH, user_id, email, expires_delta)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode a token and check its signature, issuer and expiry.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={"require": ["exp", "sub", "type"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def _validate(self, token: str, expected: TokenType) -> TokenClaims:
        payload = self.decode_token(token)
        if payload["type"] != expected.value:
            raise InvalidTokenError(f"Expected a {expected.value} token")
        return TokenClaims(
            user_id=payload["sub"],
            email=payload.get("email", ""),
            token_type=expected,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def validate_access_token(self, token: str) -> TokenClaims:
        return self._validate(token, TokenType.ACCESS)

    def validate_refresh_token(self, token: str) -> TokenClaims:
        return self._validate(token, TokenType.REFRESH)

    def get_expires_in(self, expires_delta: timedelta | None = None) -> int:
        """Access token lifetime in seconds, as reported to clients."""
        lifetime = expires_delta or self.default_lifetime(TokenType.ACCESS)
        return int(lifetime.total_seconds())


jwt_service = JWTService()
