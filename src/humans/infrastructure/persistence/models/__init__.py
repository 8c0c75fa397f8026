"""SQLAlchemy models for humans.inc tables.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from humans.infrastructure.persistence.models.block import BlockModel
from humans.infrastructure.persistence.models.collection import CollectionModel
from humans.infrastructure.persistence.models.profile import ProfileModel
from humans.infrastructure.persistence.models.user import UserModel

__all__ = [
    "BlockModel",
    "CollectionModel",
    "ProfileModel",
    "UserModel",
]
