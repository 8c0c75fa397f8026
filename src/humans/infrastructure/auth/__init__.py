"""Authentication infrastructure components.

This module provides password hashing, JWT token services and
email/password accounts.
"""

from humans.infrastructure.auth.account_service import (
    AccountService,
    InvalidCredentialsError,
    TokenPair,
)
from humans.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTError,
    JWTService,
    TokenClaims,
    TokenExpiredError,
    TokenType,
    jwt_service,
)
from humans.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)

__all__ = [
    "AccountService",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "JWTError",
    "JWTService",
    "TokenClaims",
    "TokenExpiredError",
    "TokenType",
    "TokenPair",
    "hash_password",
    "jwt_service",
    "needs_rehash",
    "verify_password",
]
