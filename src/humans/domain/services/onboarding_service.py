"""Onboarding service.

Loads a profile's onboarding progress, merges updates into it and
persists it back. The state lives in the profile row, so every request
reads it fresh.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.entities import OnboardingState, OnboardingStep
from humans.domain.exceptions import NotFoundError, ValidationError
from humans.domain.services.ownership import require_identity
from humans.infrastructure.persistence.models import ProfileModel
from humans.infrastructure.persistence.repositories import ProfileRepository

logger = get_logger(__name__)

UPDATABLE_KEYS = frozenset(
    {
        "has_seen_welcome",
        "has_created_bio",
        "has_seen_dashboard_tour",
        "has_published_first_block",
        "tour_dismissed",
        "last_step_completed",
    }
)

STEP_UPDATES: dict[OnboardingStep, dict[str, Any]] = {
    OnboardingStep.WELCOME: {"has_seen_welcome": True},
    OnboardingStep.BIO_CREATION: {"has_created_bio": True},
    OnboardingStep.DASHBOARD_TOUR: {"has_seen_dashboard_tour": True},
    OnboardingStep.FIRST_PUBLISH: {"has_published_first_block": True},
    OnboardingStep.COMPLETED: {
        "has_seen_welcome": True,
        "has_created_bio": True,
        "has_seen_dashboard_tour": True,
        "has_published_first_block": True,
    },
}


class OnboardingService:
    """Service for the caller's onboarding progress."""

    def __init__(self, session: AsyncSession, current_user_id: str | None) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            current_user_id: The signed-in caller, if any.
        """
        self.session = session
        self.current_user_id = current_user_id
        self.repository = ProfileRepository(session)

    async def _load_profile(self) -> ProfileModel:
        user_id = require_identity(self.current_user_id)
        profile = await self.repository.get_by_id(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def get_state(self) -> OnboardingState:
        profile = await self._load_profile()
        return OnboardingState.from_dict(profile.onboarding_state)

    async def get_completed_at(self) -> datetime | None:
        profile = await self._load_profile()
        return profile.onboarding_completed_at

    async def update(self, updates: dict[str, Any]) -> OnboardingState:
        """Merge updates into the stored state and persist it.

        The merge order is defaults, then stored values, then updates.
        ``completion_percentage`` is always recomputed from the four step
        flags, and onboarding_completed_at is stamped the first time it
        reaches 100.

        Args:
            updates: Partial state; only the step flags, tour_dismissed and
                last_step_completed may be set.

        Returns:
            The new state.

        Raises:
            ValidationError: If updates contains an unknown key.
        """
        unknown = set(updates) - UPDATABLE_KEYS
        if unknown:
            raise ValidationError(
                f"Unknown onboarding fields: {', '.join(sorted(unknown))}",
                code="unknown_fields",
            )

        profile = await self._load_profile()
        merged = {
            **OnboardingState().to_dict(),
            **(profile.onboarding_state or {}),
            **updates,
        }
        state = OnboardingState.from_dict(merged)
        state.recompute_completion()

        values: dict[str, Any] = {"onboarding_state": state.to_dict()}
        if state.is_complete and profile.onboarding_completed_at is None:
            values["onboarding_completed_at"] = datetime.now(timezone.utc)

        await self.repository.update_fields(profile.id, values)
        await self.session.commit()

        logger.info(
            "Onboarding state updated",
            user_id=profile.id,
            completion_percentage=state.completion_percentage,
            last_step_completed=state.last_step_completed,
        )
        return state

    async def complete_step(self, step: OnboardingStep) -> OnboardingState:
        """Record a finished step and make it the last completed one."""
        return await self.update({**STEP_UPDATES[step], "last_step_completed": step.value})

    async def mark_welcome_seen(self) -> OnboardingState:
        return await self.complete_step(OnboardingStep.WELCOME)

    async def mark_bio_created(self) -> OnboardingState:
        return await self.complete_step(OnboardingStep.BIO_CREATION)

    async def mark_tour_seen(self) -> OnboardingState:
        return await self.complete_step(OnboardingStep.DASHBOARD_TOUR)

    async def mark_first_block_published(self) -> OnboardingState:
        return await self.complete_step(OnboardingStep.FIRST_PUBLISH)

    async def mark_completed(self) -> OnboardingState:
        return await self.complete_step(OnboardingStep.COMPLETED)

    async def dismiss_tour(self) -> OnboardingState:
        return await self.update({"tour_dismissed": True})

    async def reset(self) -> OnboardingState:
        """Clear the stored state and the completion time."""
        profile = await self._load_profile()
        await self.repository.update_fields(
            profile.id, {"onboarding_state": {}, "onboarding_completed_at": None}
        )
        await self.session.commit()
        logger.info("Onboarding reset", user_id=profile.id)
        return OnboardingState()
