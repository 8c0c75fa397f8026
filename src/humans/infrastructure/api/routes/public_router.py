"""Public page API routes.

Anonymous reads of a profile's page and of individual block pages.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from humans.core.config import get_settings
from humans.core.logging import get_logger
from humans.domain.exceptions import NotFoundError
from humans.domain.services import PublicPageService, describe_block_page
from humans.infrastructure.api.schemas import (
    BlockPageResponse,
    BlockResponse,
    CollectionResponse,
    PageMetadataResponse,
    PublicPageResponse,
    PublicProfileResponse,
)
from humans.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/{username}",
    response_model=PublicPageResponse,
    responses={404: {"description": "No such profile"}},
)
async def get_public_page(
    username: str,
    session: AsyncSession = Depends(get_db_session),
) -> PublicPageResponse:
    """Return a profile with its published, visible blocks."""
    page = await PublicPageService(session).get_public_page(username)
    if page is None:
        raise NotFoundError("Page not found")
    return PublicPageResponse(
        profile=PublicProfileResponse.model_validate(page.profile),
        blocks=[BlockResponse.model_validate(block) for block in page.blocks],
        collections=[CollectionResponse.model_validate(c) for c in page.collections],
    )


@router.get(
    "/{username}/{token}",
    response_model=BlockPageResponse,
    responses={
        308: {"description": "Block reached by ID has a slug URL"},
        404: {"description": "No such block page"},
    },
)
async def get_block_page(
    username: str,
    token: str,
    session: AsyncSession = Depends(get_db_session),
) -> BlockPageResponse | RedirectResponse:
    """Return a text block page, addressed by slug or block ID."""
    page = await PublicPageService(session).resolve_block_page(username, token)
    if page is None:
        raise NotFoundError("Page not found")

    if page.is_redirect:
        settings = get_settings()
        return RedirectResponse(
            url=f"{settings.api_prefix}/public{page.redirect_to}",
            status_code=status.HTTP_308_PERMANENT_REDIRECT,
        )

    metadata = describe_block_page(page)
    return BlockPageResponse(
        profile=PublicProfileResponse.model_validate(page.profile),
        block=BlockResponse.model_validate(page.block),
        bio_block=BlockResponse.model_validate(page.bio_block) if page.bio_block else None,
        metadata=PageMetadataResponse(
            title=metadata.title,
            description=metadata.description,
            canonical_path=metadata.canonical_path,
        ),
    )
