"""Pydantic schemas for profile endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ProfileResponse(BaseModel):
    """A profile as seen by its owner."""

    id: str
    username: str | None = None
    display_name: str | None = None
    short_bio: str | None = None
    profile_picture_url: str | None = None
    page_theme_preference: str | None = None
    onboarding_completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PublicProfileResponse(BaseModel):
    """The public part of a profile."""

    id: str
    username: str
    display_name: str | None = None
    short_bio: str | None = None
    profile_picture_url: str | None = None
    page_theme_preference: str | None = None

    model_config = {"from_attributes": True}


class ProfileUpdateRequest(BaseModel):
    """Request body for updating the caller's profile.

    Optional fields left out of the body are not changed.
    """

    username: str = Field(..., description="3-50 lowercase letters, digits or underscores")
    display_name: str | None = Field(None, description="At most 100 characters")
    short_bio: str | None = None
    page_theme_preference: Literal["light", "dark", "system"] | None = None


class UsernameAvailabilityResponse(BaseModel):
    username: str
    is_available: bool


class AvatarResponse(BaseModel):
    profile_picture_url: str
