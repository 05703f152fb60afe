"""VisitedPlace ORM — one user's record of visiting a county (a "post" in the feed).

Invariants:
    - id is UUID primary key
    - user_id is the identity provider's user id (email for OAuth users)
    - county holds the short Chinese name for new rows; legacy rows hold English names
    - image_url mirrors image_urls[0] for clients that only render one photo
    - is_public=False rows are visible to their owner only

Design Decisions:
    - JSON column for image_urls: portable between Postgres and the SQLite test DB
    - ORM cascade on comments/likes/notifications so deletes behave the same on
      databases without enforced foreign keys
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from travel_map.db.base import Base


class VisitedPlace(Base):
    """A visit to a county with optional note and photos."""
    __tablename__ = "visited_places"
    __table_args__ = (
        Index("ix_visited_places_user_created", "user_id", "created_at"),
        Index("ix_visited_places_county", "county"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    county: Mapped[str] = mapped_column(String(50), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    ig_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_urls: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="post",
        cascade="all",
    )
    likes: Mapped[list["Like"]] = relationship(
        "Like", back_populates="post",
        cascade="all",
    )
    notifications: Mapped[list["Notification"]] = relationship(
        "Notification", back_populates="post",
        cascade="all",
    )
