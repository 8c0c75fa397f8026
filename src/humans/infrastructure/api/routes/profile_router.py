"""Profile API routes.

Provides endpoints for reading and updating the caller's profile, checking
username availability and managing the avatar image.
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.logging import get_logger
from humans.domain.services import ProfileService
from humans.infrastructure.api.dependencies import AuthenticatedUser, OptionalUser, Storage
from humans.infrastructure.api.schemas import (
    AvatarResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    UsernameAvailabilityResponse,
)
from humans.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=ProfileResponse, responses={404: {"description": "No profile"}})
async def get_profile(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    """Return the caller's profile."""
    profile = await ProfileService(session, current_user.user_id).get_profile()
    return ProfileResponse.model_validate(profile)


@router.patch(
    "",
    response_model=ProfileResponse,
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Conflict - username already taken"},
    },
)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    """Update the caller's profile.

    The username is always sent; the other fields change only when present
    in the body.
    """
    optional = request.model_dump(
        include={"display_name", "short_bio", "page_theme_preference"},
        exclude_unset=True,
    )
    profile = await ProfileService(session, current_user.user_id).update_profile(
        request.username, **optional
    )
    return ProfileResponse.model_validate(profile)


@router.get("/username-availability", response_model=UsernameAvailabilityResponse)
async def check_username_availability(
    current_user: OptionalUser,
    username: str = Query(..., description="Username to check"),
    session: AsyncSession = Depends(get_db_session),
) -> UsernameAvailabilityResponse:
    """Check whether a username is free.

    Signed-in callers see their own username as available.
    """
    caller_id = current_user.user_id if current_user else None
    is_available = await ProfileService(session, caller_id).check_username_availability(username)
    return UsernameAvailabilityResponse(username=username, is_available=is_available)


@router.post(
    "/avatar",
    status_code=status.HTTP_201_CREATED,
    response_model=AvatarResponse,
    responses={
        400: {"description": "Empty, too large or disallowed file"},
        502: {"description": "Object store error"},
    },
)
async def upload_avatar(
    current_user: AuthenticatedUser,
    storage: Storage,
    file: UploadFile = File(..., description="Avatar image"),
    session: AsyncSession = Depends(get_db_session),
) -> AvatarResponse:
    """Upload a new avatar image for the caller."""
    content = await file.read()
    service = ProfileService(session, current_user.user_id, storage=storage)
    url = await service.upload_avatar(
        filename=file.filename or "avatar",
        content=content,
        content_type=file.content_type or "application/octet-stream",
    )
    return AvatarResponse(profile_picture_url=url)


@router.delete("/avatar", status_code=status.HTTP_204_NO_CONTENT)
async def delete_avatar(
    current_user: AuthenticatedUser,
    storage: Storage,
    session: AsyncSession = Depends(get_db_session),
) -> None:
    """Remove the caller's avatar image."""
    await ProfileService(session, current_user.user_id, storage=storage).delete_avatar()
