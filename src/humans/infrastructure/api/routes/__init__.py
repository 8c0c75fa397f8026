"""API route handlers."""

from humans.infrastructure.api.routes.auth_router import router as auth_router
from humans.infrastructure.api.routes.blocks_router import router as blocks_router
from humans.infrastructure.api.routes.collections_router import router as collections_router
from humans.infrastructure.api.routes.files_router import router as files_router
from humans.infrastructure.api.routes.onboarding_router import router as onboarding_router
from humans.infrastructure.api.routes.profile_router import router as profile_router
from humans.infrastructure.api.routes.public_router import router as public_router

__all__ = [
    "auth_router",
    "blocks_router",
    "collections_router",
    "files_router",
    "onboarding_router",
    "profile_router",
    "public_router",
]
