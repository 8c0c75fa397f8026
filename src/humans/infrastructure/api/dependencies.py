"""FastAPI dependencies for identity and service wiring.

Provides dependencies for extracting and validating JWT tokens from requests.
Routes pass the resolved caller id down to the domain services, which
re-check ownership themselves.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header

from humans.core.logging import bind_user_id, get_logger
from humans.domain.exceptions import AuthenticationRequiredError
from humans.infrastructure.auth import (
    InvalidTokenError,
    TokenExpiredError,
    jwt_service,
)
from humans.infrastructure.storage import StorageProvider, get_storage_provider

logger = get_logger(__name__)


@dataclass
class CurrentUser:
    """Represents the current authenticated user context.

    Extracted from a valid JWT access token.
    """

    user_id: str
    email: str


async def get_current_identity(
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser | None:
    """Resolve the caller from the Authorization header, if any.

    A missing, malformed, expired or invalid token yields None; routes
    that need an identity use ``get_current_user`` instead.

    Args:
        authorization: The Authorization header value (e.g., "Bearer <token>").

    Returns:
        CurrentUser | None: The caller's context, or None when anonymous.
    """
    if authorization is None:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        return None

    try:
        claims = jwt_service.validate_access_token(parts[1])
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        return None
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        return None

    bind_user_id(claims.user_id)
    return CurrentUser(user_id=claims.user_id, email=claims.email)


async def get_current_user(
    identity: Annotated[CurrentUser | None, Depends(get_current_identity)],
) -> CurrentUser:
    """Require an authenticated caller.

    Raises:
        AuthenticationRequiredError: If the request carries no valid access token.
    """
    if identity is None:
        raise AuthenticationRequiredError()
    return identity


def get_storage() -> StorageProvider:
    """Dependency returning the configured object store."""
    return get_storage_provider()


# Type aliases for cleaner route signatures
AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]
OptionalUser = Annotated[CurrentUser | None, Depends(get_current_identity)]
Storage = Annotated[StorageProvider, Depends(get_storage)]
