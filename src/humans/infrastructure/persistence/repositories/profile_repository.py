"""Profile repository for database operations."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from humans.infrastructure.persistence.models import ProfileModel


class ProfileRepository:
    """Repository for profile database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, profile: ProfileModel) -> ProfileModel:
        """Create a new profile.

        Args:
            profile: Profile model to create.

        Returns:
            Created profile model.
        """
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def get_by_id(self, profile_id: str) -> ProfileModel | None:
        """Get a profile by ID (the owning user's ID)."""
        result = await self.session.execute(
            select(ProfileModel).where(ProfileModel.id == profile_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> ProfileModel | None:
        """Get a profile by its public username.

        Args:
            username: Username to look up.

        Returns:
            Profile model if found, None otherwise.
        """
        result = await self.session.execute(
            select(ProfileModel).where(ProfileModel.username == username)
        )
        return result.scalar_one_or_none()

    async def username_taken(self, username: str, exclude_profile_id: str | None = None) -> bool:
        """Check whether a username belongs to a profile.

        Args:
            username: Username to check.
            exclude_profile_id: Profile to ignore (the caller's own).

        Returns:
            True if another profile holds the username.
        """
        query = select(ProfileModel.id).where(ProfileModel.username == username)
        if exclude_profile_id is not None:
            query = query.where(ProfileModel.id != exclude_profile_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def update_fields(self, profile_id: str, values: dict[str, Any]) -> int:
        """Apply a partial update to a profile.

        Args:
            profile_id: Profile to update.
            values: Column values to set.

        Returns:
            Number of rows matched.
        """
        result = await self.session.execute(
            update(ProfileModel)
            .where(ProfileModel.id == profile_id)
            .values(**values, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="evaluate")
        )
        await self.session.flush()
        return result.rowcount
