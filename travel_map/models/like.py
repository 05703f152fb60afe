"""Like ORM — a user's like on either a post or a comment.

Invariants:
    - Exactly one of post_id / comment_id is set (check constraint)
    - One like per (user, post) and per (user, comment) (unique constraints)
    - Post likes have comment_id NULL; counts of post likes filter on that

Design Decisions:
    - Two nullable FKs over a polymorphic target column: real FK cascades
      on both sides
    - Uniqueness lives in the database; the service pre-check only exists to
      answer 409 without relying on the constraint error text
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from travel_map.db.base import Base


class Like(Base):
    """Like on a post or comment."""
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        UniqueConstraint("user_id", "comment_id", name="uq_likes_user_comment"),
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="ck_likes_single_target",
        ),
        Index("ix_likes_post", "post_id"),
        Index("ix_likes_comment", "comment_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    post_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("visited_places.id", ondelete="CASCADE"),
        nullable=True,
    )
    comment_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    post: Mapped["VisitedPlace | None"] = relationship(
        "VisitedPlace", back_populates="likes",
    )
    comment: Mapped["Comment | None"] = relationship(
        "Comment", back_populates="likes",
    )
