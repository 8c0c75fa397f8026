"""Domain entities for humans.inc.

Entities are plain Python dataclasses and enums describing core business
concepts and the composite views returned by services.
"""

from humans.domain.entities.block import (
    BlockLayoutUpdate,
    BlockPage,
    BlockPositionUpdate,
    BlocksByCollection,
    BlockType,
    PublicPage,
)
from humans.domain.entities.onboarding import OnboardingState, OnboardingStep

__all__ = [
    "BlockLayoutUpdate",
    "BlockPage",
    "BlockPositionUpdate",
    "BlockType",
    "BlocksByCollection",
    "OnboardingState",
    "OnboardingStep",
    "PublicPage",
]
