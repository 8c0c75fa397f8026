"""Pydantic schemas for onboarding endpoints."""

from datetime import datetime

from pydantic import BaseModel


class OnboardingStateResponse(BaseModel):
    has_seen_welcome: bool
    has_created_bio: bool
    has_seen_dashboard_tour: bool
    has_published_first_block: bool
    tour_dismissed: bool
    last_step_completed: str | None = None
    completion_percentage: int
    onboarding_completed_at: datetime | None = None


class OnboardingUpdateRequest(BaseModel):
    """Partial onboarding state; completion_percentage is always derived."""

    has_seen_welcome: bool | None = None
    has_created_bio: bool | None = None
    has_seen_dashboard_tour: bool | None = None
    has_published_first_block: bool | None = None
    tour_dismissed: bool | None = None
    last_step_completed: str | None = None
