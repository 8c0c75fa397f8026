"""SQLAlchemy model for the profiles table.

A profile is the public identity of a user: its username is the routing
key of the user's page. The row is created at signup with no username;
blocks cannot be created until the username is set.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from humans.infrastructure.persistence.database import Base


class ProfileModel(Base):
    """SQLAlchemy model for the profiles table.

    Attributes:
        id: Primary key, same value as the owning user's ID.
        username: Globally unique public username (null until setup).
        display_name: Name shown on the public page.
        short_bio: Short free-text bio.
        profile_picture_url: Public URL of the avatar image.
        page_theme_preference: light, dark or system.
        onboarding_state: Onboarding progress document.
        onboarding_completed_at: When onboarding reached 100%.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Profile ID (same as user ID)",
    )
    username: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        unique=True,
        index=True,
        comment="Public username (3-50 chars, lowercase letters, digits, underscores)",
    )
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    short_bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_picture_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    page_theme_preference: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        comment="light, dark or system",
    )
    onboarding_state: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
    onboarding_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
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

    user: Mapped["UserModel"] = relationship(  # noqa: F821
        "UserModel",
        back_populates="profile",
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username={self.username})>"
