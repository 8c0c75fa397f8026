"""Repositories for humans.inc database operations."""

from humans.infrastructure.persistence.repositories.block_repository import BlockRepository
from humans.infrastructure.persistence.repositories.collection_repository import (
    CollectionRepository,
)
from humans.infrastructure.persistence.repositories.profile_repository import ProfileRepository
from humans.infrastructure.persistence.repositories.user_repository import UserRepository

__all__ = [
    "BlockRepository",
    "CollectionRepository",
    "ProfileRepository",
    "UserRepository",
]
