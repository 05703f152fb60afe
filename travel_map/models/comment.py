"""Comment ORM — a reply on a visited place.

Invariants:
    - Always belongs to a VisitedPlace (post_id FK, cascade on delete)
    - content is trimmed and non-empty (enforced at the schema boundary)
    - Deleting a comment deletes its likes (DB cascade + ORM cascade)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from travel_map.db.base import Base


class Comment(Base):
    """Comment on a post."""
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_post_created", "post_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("visited_places.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
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
    post: Mapped["VisitedPlace"] = relationship(
        "VisitedPlace", back_populates="comments",
    )
    likes: Mapped[list["Like"]] = relationship(
        "Like", back_populates="comment",
        cascade="all",
    )
    notifications: Mapped[list["Notification"]] = relationship(
        "Notification", back_populates="comment",
        cascade="all",
    )
