"""Pydantic request and response schemas for the HTTP API."""

from humans.infrastructure.api.schemas.auth_schemas import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RefreshRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from humans.infrastructure.api.schemas.block_schemas import (
    BlockCreateRequest,
    BlockLayoutRequest,
    BlockPublishRequest,
    BlockReorderRequest,
    BlockResponse,
    BlockToggleResponse,
    BlockUpdateRequest,
    MoveBlockRequest,
)
from humans.infrastructure.api.schemas.collection_schemas import (
    BlocksByCollectionResponse,
    CollectionCreateRequest,
    CollectionResponse,
    CollectionUpdateRequest,
)
from humans.infrastructure.api.schemas.error_schemas import (
    BatchErrorResponse,
    ConflictErrorResponse,
    ErrorResponse,
    ValidationErrorResponse,
)
from humans.infrastructure.api.schemas.onboarding_schemas import (
    OnboardingStateResponse,
    OnboardingUpdateRequest,
)
from humans.infrastructure.api.schemas.profile_schemas import (
    AvatarResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    PublicProfileResponse,
    UsernameAvailabilityResponse,
)
from humans.infrastructure.api.schemas.public_schemas import (
    BlockPageResponse,
    PageMetadataResponse,
    PublicPageResponse,
)

__all__ = [
    "AuthResponse",
    "AvatarResponse",
    "BatchErrorResponse",
    "BlockCreateRequest",
    "BlockLayoutRequest",
    "BlockPageResponse",
    "BlockPublishRequest",
    "BlockReorderRequest",
    "BlockResponse",
    "BlockToggleResponse",
    "BlockUpdateRequest",
    "BlocksByCollectionResponse",
    "CollectionCreateRequest",
    "CollectionResponse",
    "CollectionUpdateRequest",
    "ConflictErrorResponse",
    "ErrorResponse",
    "LoginRequest",
    "MeResponse",
    "MoveBlockRequest",
    "OnboardingStateResponse",
    "OnboardingUpdateRequest",
    "PageMetadataResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "PublicPageResponse",
    "PublicProfileResponse",
    "RefreshRequest",
    "SignupRequest",
    "TokenResponse",
    "UserResponse",
    "UsernameAvailabilityResponse",
    "ValidationErrorResponse",
]
