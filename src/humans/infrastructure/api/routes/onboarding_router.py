"""Onboarding API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from humans.domain.entities import OnboardingState, OnboardingStep
from humans.domain.services import OnboardingService
from humans.infrastructure.api.dependencies import AuthenticatedUser
from humans.infrastructure.api.schemas import OnboardingStateResponse, OnboardingUpdateRequest
from humans.infrastructure.persistence.database import get_db_session

router = APIRouter()


async def _respond(service: OnboardingService, state: OnboardingState) -> OnboardingStateResponse:
    return OnboardingStateResponse(
        **state.to_dict(),
        onboarding_completed_at=await service.get_completed_at(),
    )


@router.get("", response_model=OnboardingStateResponse)
async def get_onboarding_state(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> OnboardingStateResponse:
    service = OnboardingService(session, current_user.user_id)
    return await _respond(service, await service.get_state())


@router.patch(
    "",
    response_model=OnboardingStateResponse,
    responses={400: {"description": "Unknown onboarding field"}},
)
async def update_onboarding_state(
    request: OnboardingUpdateRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> OnboardingStateResponse:
    """Merge the given fields into the stored state."""
    service = OnboardingService(session, current_user.user_id)
    state = await service.update(request.model_dump(exclude_unset=True))
    return await _respond(service, state)


@router.post("/steps/{step}", response_model=OnboardingStateResponse)
async def complete_onboarding_step(
    step: OnboardingStep,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> OnboardingStateResponse:
    """Record a finished onboarding step."""
    service = OnboardingService(session, current_user.user_id)
    return await _respond(service, await service.complete_step(step))


@router.post("/reset", response_model=OnboardingStateResponse)
async def reset_onboarding(
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> OnboardingStateResponse:
    service = OnboardingService(session, current_user.user_id)
    return await _respond(service, await service.reset())
