"""Domain services for humans.inc.

Services hold the business rules: slug handling, block and collection
stores, public page resolution, profiles and onboarding.
"""

from humans.domain.services.block_content import (
    BlockConfig,
    validate_block_config,
    validate_block_content,
)
from humans.domain.services.block_service import BlockService
from humans.domain.services.collection_service import CollectionService
from humans.domain.services.onboarding_service import OnboardingService
from humans.domain.services.profile_service import ProfileService, ProfileValidationError
from humans.domain.services.public_page_service import (
    PageMetadata,
    PublicPageService,
    describe_block_page,
)
from humans.domain.services.slug_generator import SlugGenerator, SlugValidationError
from humans.domain.services.slug_resolver import SlugResolver

__all__ = [
    "BlockConfig",
    "BlockService",
    "CollectionService",
    "OnboardingService",
    "PageMetadata",
    "ProfileService",
    "ProfileValidationError",
    "PublicPageService",
    "SlugGenerator",
    "SlugResolver",
    "SlugValidationError",
    "describe_block_page",
    "validate_block_config",
    "validate_block_content",
]
