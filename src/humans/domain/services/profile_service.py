"""Profile service for business logic.

Handles profile reads and updates, the username rules, username
availability and avatar images in the object store.
"""

import re
import time
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.config import get_settings
from humans.core.logging import get_logger
from humans.domain.exceptions import (
    NotFoundError,
    ProfileSetupRequiredError,
    StorageError,
    UsernameTakenError,
    ValidationError,
)
from humans.domain.services.ownership import require_identity
from humans.infrastructure.persistence.models import ProfileModel
from humans.infrastructure.persistence.repositories import ProfileRepository
from humans.infrastructure.storage.base import StorageProvider

logger = get_logger(__name__)

ThemePreference = Literal["light", "dark", "system"]

# Sentinel for "field not provided" in partial updates
UNSET: Any = object()


@dataclass(frozen=True)
class ProfileValidationError:
    """A single profile validation error."""

    field: str
    message: str
    code: str


class ProfileService:
    """Service for profile business logic."""

    MIN_USERNAME_LENGTH = 3
    MAX_USERNAME_LENGTH = 50
    MAX_DISPLAY_NAME_LENGTH = 100
    USERNAME_PATTERN = re.compile(r"^[a-z0-9_]+$")
    THEME_PREFERENCES = ("light", "dark", "system")

    def __init__(
        self,
        session: AsyncSession,
        current_user_id: str | None,
        storage: StorageProvider | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            current_user_id: The signed-in caller, if any.
            storage: Object store for avatar images.
        """
        self.session = session
        self.current_user_id = current_user_id
        self.storage = storage
        self.settings = get_settings()
        self.repository = ProfileRepository(session)

    @classmethod
    def validate_username(
        cls, username: str, reserved: list[str] | None = None
    ) -> list[ProfileValidationError]:
        """Validate a username against the rules.

        Args:
            username: The username to validate.
            reserved: Names that cannot be claimed.

        Returns:
            List of validation errors (empty if valid).
        """
        errors: list[ProfileValidationError] = []

        if len(username) < cls.MIN_USERNAME_LENGTH:
            errors.append(
                ProfileValidationError(
                    field="username",
                    message="Username must be at least 3 characters long.",
                    code="username_too_short",
                )
            )
        if len(username) > cls.MAX_USERNAME_LENGTH:
            errors.append(
                ProfileValidationError(
                    field="username",
                    message="Username cannot be longer than 50 characters.",
                    code="username_too_long",
                )
            )
        if not cls.USERNAME_PATTERN.fullmatch(username):
            errors.append(
                ProfileValidationError(
                    field="username",
                    message="Username can only contain lowercase letters, numbers, and underscores.",
                    code="username_invalid_chars",
                )
            )
        if reserved and username in reserved:
            errors.append(
                ProfileValidationError(
                    field="username",
                    message="This username is reserved and cannot be used.",
                    code="username_reserved",
                )
            )

        return errors

    async def get_profile(self) -> ProfileModel:
        """Get the caller's profile.

        Raises:
            AuthenticationRequiredError: If nobody is signed in.
            NotFoundError: If the caller has no profile row.
        """
        user_id = require_identity(self.current_user_id)
        profile = await self.repository.get_by_id(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def require_profile_setup(self) -> ProfileModel:
        """Get the caller's profile, insisting that its username is set.

        Raises:
            AuthenticationRequiredError: If nobody is signed in.
            ProfileSetupRequiredError: If there is no profile or no username.
        """
        user_id = require_identity(self.current_user_id)
        profile = await self.repository.get_by_id(user_id)
        if profile is None or not profile.username:
            logger.info("Profile setup required", user_id=user_id)
            raise ProfileSetupRequiredError()
        return profile

    async def create_profile(self, user_id: str) -> ProfileModel:
        """Create the empty profile row of a new user (no username yet)."""
        profile = ProfileModel(id=user_id, username=None, onboarding_state={})
        return await self.repository.create(profile)

    async def update_profile(
        self,
        username: str,
        display_name: str | None = UNSET,
        short_bio: str | None = UNSET,
        page_theme_preference: ThemePreference | None = UNSET,
    ) -> ProfileModel:
        """Update the caller's profile.

        Args:
            username: New or unchanged username.
            display_name: Name shown on the page (at most 100 characters).
            short_bio: Short free-text bio.
            page_theme_preference: light, dark, system or None.

        Returns:
            The updated profile.

        Raises:
            ValidationError: If a field breaks the profile rules.
            UsernameTakenError: If another profile holds the username.
        """
        user_id = require_identity(self.current_user_id)
        profile = await self.get_profile()

        errors = self.validate_username(username, self.settings.reserved_usernames)
        if errors:
            raise ValidationError(errors[0].message, field=errors[0].field, code=errors[0].code)

        values: dict[str, Any] = {"username": username}
        if display_name is not UNSET:
            if display_name is not None and len(display_name) > self.MAX_DISPLAY_NAME_LENGTH:
                raise ValidationError(
                    "Display name cannot be longer than 100 characters.",
                    field="display_name",
                    code="display_name_too_long",
                )
            values["display_name"] = display_name
        if short_bio is not UNSET:
            values["short_bio"] = short_bio
        if page_theme_preference is not UNSET:
            if (
                page_theme_preference is not None
                and page_theme_preference not in self.THEME_PREFERENCES
            ):
                raise ValidationError(
                    "Theme preference must be light, dark or system.",
                    field="page_theme_preference",
                    code="invalid_theme",
                )
            values["page_theme_preference"] = page_theme_preference

        if await self.repository.username_taken(username, exclude_profile_id=user_id):
            raise UsernameTakenError()

        try:
            async with self.session.begin_nested():
                await self.repository.update_fields(user_id, values)
        except IntegrityError as e:
            raise UsernameTakenError() from e

        await self.session.commit()
        await self.session.refresh(profile)
        logger.info("Profile updated", user_id=user_id, fields=sorted(values))
        return profile

    async def check_username_availability(self, username: str) -> bool:
        """Check whether a username is free.

        Blank input counts as available. The caller's own username does not
        count as taken. Works without a signed-in caller.
        """
        if not username.strip():
            return True
        return not await self.repository.username_taken(
            username, exclude_profile_id=self.current_user_id
        )

    def _require_storage(self) -> StorageProvider:
        if self.storage is None:
            raise StorageError("No storage provider configured")
        return self.storage

    def _avatar_path_from_url(self, user_id: str, url: str | None) -> str | None:
        """Recover the object path of an avatar URL we issued, if it is one."""
        if not url:
            return None
        marker = f"/{self.settings.avatar_bucket}/"
        if marker not in url:
            return None
        path = url.split(marker, 1)[1]
        if not path.startswith(f"{user_id}/"):
            return None
        return path

    async def upload_avatar(self, filename: str, content: bytes, content_type: str) -> str:
        """Store a new avatar image and point the profile at it.

        The object lands at ``<user_id>/avatar-<epoch ms>.<ext>``. The
        previous avatar object is removed afterwards; a failure of that
        removal is logged and ignored.

        Args:
            filename: Original filename (used for the extension).
            content: Image bytes.
            content_type: MIME type of the image.

        Returns:
            The public URL of the new avatar.

        Raises:
            ValidationError: If the file is empty, too large or of a
                disallowed type.
            StorageError: If the object store rejects the upload.
        """
        user_id = require_identity(self.current_user_id)
        storage = self._require_storage()
        profile = await self.get_profile()

        if not content:
            raise ValidationError("No file provided for upload.", field="file", code="empty_file")
        if len(content) > self.settings.max_avatar_size:
            max_size_mb = self.settings.max_avatar_size / (1024 * 1024)
            raise ValidationError(
                f"Avatar exceeds the maximum size of {max_size_mb:.0f}MB",
                field="file",
                code="file_too_large",
            )
        if content_type not in self.settings.allowed_avatar_types:
            raise ValidationError(
                f"File type '{content_type}' is not allowed. "
                f"Allowed types: {', '.join(self.settings.allowed_avatar_types)}",
                field="file",
                code="invalid_file_type",
            )

        extension = filename.rsplit(".", 1)[-1]
        path = f"{user_id}/avatar-{int(time.time() * 1000)}.{extension}"
        bucket = self.settings.avatar_bucket

        stored_path = await storage.upload(
            bucket,
            path,
            content,
            content_type=content_type,
            cache_control=self.settings.avatar_cache_control,
            upsert=True,
        )
        public_url = storage.get_public_url(bucket, stored_path)

        previous_path = self._avatar_path_from_url(user_id, profile.profile_picture_url)

        try:
            await self.repository.update_fields(user_id, {"profile_picture_url": public_url})
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            try:
                await storage.remove(bucket, [stored_path])
            except StorageError as e:
                logger.warning(
                    "Could not delete orphaned avatar",
                    user_id=user_id,
                    path=stored_path,
                    error=str(e),
                )
            raise
        logger.info("Avatar uploaded", user_id=user_id, path=stored_path)

        if previous_path and previous_path != stored_path:
            try:
                await storage.remove(bucket, [previous_path])
            except StorageError as e:
                logger.warning(
                    "Could not delete previous avatar",
                    user_id=user_id,
                    path=previous_path,
                    error=str(e),
                )

        return public_url

    async def delete_avatar(self) -> None:
        """Remove the caller's avatar object and clear the profile URL.

        Raises:
            StorageError: If the object store refuses the deletion.
        """
        user_id = require_identity(self.current_user_id)
        profile = await self.get_profile()
        if not profile.profile_picture_url:
            return

        path = self._avatar_path_from_url(user_id, profile.profile_picture_url)
        if path:
            await self._require_storage().remove(self.settings.avatar_bucket, [path])

        await self.repository.update_fields(user_id, {"profile_picture_url": None})
        await self.session.commit()
        logger.info("Avatar deleted", user_id=user_id, path=path)
