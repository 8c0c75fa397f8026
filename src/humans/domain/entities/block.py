"""Block entities.

A block is one ordered, user-owned content unit of a profile page. The
persistent record lives in the blocks table; this module holds the closed
set of block types and the composite views the services return.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from humans.infrastructure.persistence.models import (
        BlockModel,
        CollectionModel,
        ProfileModel,
    )


class BlockType(str, Enum):
    """Closed set of block types.

    MEDIA and GALLERY are reserved names with no content schema yet.
    """

    BIO = "bio"
    TEXT = "text"
    LINKS = "links"
    CONTENT_LIST = "content_list"
    MEDIA = "media"
    GALLERY = "gallery"

    @classmethod
    def implemented(cls) -> frozenset["BlockType"]:
        return frozenset({cls.BIO, cls.TEXT, cls.LINKS, cls.CONTENT_LIST})


@dataclass
class BlocksByCollection:
    """A user's blocks partitioned by collection membership.

    Attributes:
        collections: The user's collections in display order.
        blocks_by_collection: Blocks keyed by collection ID, in position order.
        uncategorized_blocks: Blocks whose collection_id is null.
    """

    collections: list["CollectionModel"]
    blocks_by_collection: dict[str, list["BlockModel"]] = field(default_factory=dict)
    uncategorized_blocks: list["BlockModel"] = field(default_factory=list)


@dataclass
class BlockPage:
    """Resolution of a public individual block page.

    When ``redirect_to`` is set the caller must redirect there instead of
    rendering the block: the block was reached by its UUID but has a slug.
    """

    profile: "ProfileModel"
    block: "BlockModel"
    bio_block: "BlockModel | None" = None
    redirect_to: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_to is not None


@dataclass
class PublicPage:
    """Everything a visitor sees on a profile's main page."""

    profile: "ProfileModel"
    blocks: list["BlockModel"]
    collections: list["CollectionModel"] = field(default_factory=list)


@dataclass(frozen=True)
class BlockPositionUpdate:
    """New dashboard position for one block of a reorder batch."""

    id: str
    position: int


@dataclass(frozen=True)
class BlockLayoutUpdate:
    """New public visibility and order for one block of a layout batch."""

    id: str
    is_visible: bool
    display_order: int | None
