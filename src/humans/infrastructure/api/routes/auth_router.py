"""Authentication API routes.

Provides endpoints for signup, login, token refresh and the current identity.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.infrastructure.api.dependencies import AuthenticatedUser
from humans.infrastructure.api.schemas import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RefreshRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from humans.infrastructure.auth import (
    AccountService,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    jwt_service,
)
from humans.infrastructure.persistence.database import get_db_session
from humans.infrastructure.persistence.repositories import ProfileRepository, UserRepository

logger = get_logger(__name__)

router = APIRouter()


def _auth_response(user, tokens) -> AuthResponse:
    return AuthResponse(
        token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Conflict - email already registered"},
    },
)
async def signup(
    request: SignupRequest,
    session: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    """Create an account and sign it in.

    The new user gets an empty profile; the username is chosen later
    through PATCH /profile.
    """
    service = AccountService(session)
    user = await service.signup(request.email, request.password)
    return _auth_response(user, service.issue_tokens(user.id, user.email))


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
    responses={
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> AuthResponse | JSONResponse:
    """Authenticate a user and return JWT tokens.

    All credential failures return the same generic 401 message.
    """
    service = AccountService(session)
    try:
        user = await service.authenticate(request.email, request.password)
    except InvalidCredentialsError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error": "Authentication failed",
                "message": "Invalid credentials",
            },
        )

    return _auth_response(user, service.issue_tokens(user.id, user.email))


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=TokenResponse,
    responses={
        401: {"description": "Invalid or expired refresh token"},
    },
)
async def refresh(
    request: RefreshRequest,
    session: AsyncSession = Depends(get_db_session),
) -> TokenResponse | JSONResponse:
    """Exchange a refresh token for a new token pair."""
    invalid = JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "error": "Authentication failed",
            "message": "Invalid refresh token",
        },
    )

    try:
        claims = jwt_service.validate_refresh_token(request.refresh_token)
    except TokenExpiredError:
        logger.info("Token refresh failed: token expired")
        return invalid
    except InvalidTokenError as e:
        logger.info("Token refresh failed: invalid token", error=str(e))
        return invalid

    user = await UserRepository(session).get_by_id(claims.user_id)
    if user is None or not user.is_active:
        logger.info("Token refresh failed: user unavailable", user_id=claims.user_id)
        return invalid

    tokens = AccountService.issue_tokens(user.id, user.email)
    return TokenResponse(
        token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.get("/me", response_model=MeResponse)
async def me(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    """Return the identity behind the access token."""
    profile = await ProfileRepository(session).get_by_id(current_user.user_id)
    return MeResponse(
        user_id=current_user.user_id,
        email=current_user.email,
        username=profile.username if profile else None,
    )
