"""SQLAlchemy model for the blocks table.

Blocks carry two independent orderings: ``position`` is the dashboard
authoring order and ``display_order`` is the public page order.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from humans.infrastructure.persistence.database import Base


class BlockModel(Base):
    """SQLAlchemy model for the blocks table.

    Attributes:
        id: Primary key (UUID string).
        user_id: Owning profile.
        position: Dashboard authoring order.
        display_order: Public page order (nullable, sorted last).
        block_type: bio, text, links, content_list, media or gallery.
        title: Optional title.
        slug: Optional address, unique among the owner's blocks.
        content: Type-specific payload.
        config: Presentational hints.
        is_published: Draft (False) or live (True).
        is_visible: Soft show/hide, independent of publication.
        collection_id: Optional collection; null means uncategorized.
    """

    __tablename__ = "blocks"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Block ID (UUID)",
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning profile",
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    display_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    block_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    slug: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Per-owner unique URL slug",
    )
    content: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
    config: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    collection_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("collections.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_blocks_user_slug"),
        Index("ix_blocks_user_position", "user_id", "position"),
    )

    def __repr__(self) -> str:
        return f"<Block(id={self.id}, type={self.block_type}, user_id={self.user_id})>"
