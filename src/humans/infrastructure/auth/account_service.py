"""Email/password accounts.

Signup creates the user and its empty profile together; the username is
chosen later through the profile settings.
"""

import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.config import get_settings
from humans.core.logging import get_logger
from humans.domain.exceptions import EmailTakenError, ValidationError
from humans.domain.services.profile_service import ProfileService
from humans.infrastructure.auth.jwt_service import jwt_service
from humans.infrastructure.auth.password_hasher import hash_password, needs_rehash, verify_password
from humans.infrastructure.persistence.models import UserModel
from humans.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair does not match an active user."""


@dataclass
class TokenPair:
    """Tokens issued on signup, login and refresh."""

    access_token: str
    refresh_token: str
    expires_in: int


class AccountService:
    """Signup, login and token refresh."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = UserRepository(session)

    @staticmethod
    def issue_tokens(user_id: str, email: str) -> TokenPair:
        return TokenPair(
            access_token=jwt_service.create_access_token(user_id=user_id, email=email),
            refresh_token=jwt_service.create_refresh_token(user_id=user_id, email=email),
            expires_in=jwt_service.get_expires_in(),
        )

    async def signup(self, email: str, password: str) -> UserModel:
        """Create a user and its empty profile.

        Raises:
            ValidationError: If the password is too short.
            EmailTakenError: If the email is already registered.
        """
        settings = get_settings()
        if len(password) < settings.min_password_length:
            raise ValidationError(
                f"Password must be at least {settings.min_password_length} characters",
                field="password",
                code="password_too_short",
            )

        email = email.lower()
        if await self.repository.email_exists(email):
            raise EmailTakenError()

        user = UserModel(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        await self.repository.create(user)
        await ProfileService(self.session, user.id).create_profile(user.id)
        await self.session.commit()

        logger.info("User signed up", user_id=user.id)
        return user

    async def authenticate(self, email: str, password: str) -> UserModel:
        """Check credentials and record the login.

        Raises:
            InvalidCredentialsError: If the pair does not match an active user.
        """
        user = await self.repository.get_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            logger.info("Login failed", email_domain=email.rsplit("@", 1)[-1])
            raise InvalidCredentialsError("Invalid email or password")

        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)

        await self.repository.update_last_login(user.id)
        await self.session.commit()
        logger.info("User logged in", user_id=user.id)
        return user
