"""Like Service — liking and unliking posts and comments.

Invariants:
    - A like targets exactly one existing post or comment (404 otherwise)
    - A second like on the same target is AlreadyLikedError (409), whether
      caught by the pre-check or by the unique constraint under a race
    - Liking notifies the target's author in the same transaction
    - Unlike is idempotent: removing a missing like is not an error
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.domain_types import LikeTarget, SessionUser
from travel_map.core.errors import AlreadyLikedError, ResourceNotFoundError
from travel_map.core.notification_policy import notification_type_for_like
from travel_map.core.post_view import serialize_like
from travel_map.models.comment import Comment
from travel_map.models.like import Like
from travel_map.models.visited_place import VisitedPlace
from travel_map.schemas.social import LikeCreate
from travel_map.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class LikeService:
    """Like operations for the signed-in user."""

    def __init__(self, db: AsyncSession, user: SessionUser):
        self.db = db
        self.user = user

    async def list_post_likes(self, post_id: UUID) -> list[dict]:
        result = await self.db.execute(
            select(Like)
            .where(Like.post_id == post_id, Like.comment_id.is_(None))
            .order_by(Like.created_at.desc()),
        )
        return [serialize_like(like) for like in result.scalars().all()]

    async def like(self, body: LikeCreate) -> dict:
        target = body.target
        if target is LikeTarget.COMMENT:
            comment = await self.db.get(Comment, body.comment_id)
            if comment is None:
                raise ResourceNotFoundError("Comment", str(body.comment_id))
            author_id, post_id, comment_id = (
                comment.user_id, comment.post_id, comment.id,
            )
        else:
            post = await self.db.get(VisitedPlace, body.post_id)
            if post is None:
                raise ResourceNotFoundError("Post", str(body.post_id))
            author_id, post_id, comment_id = post.user_id, post.id, None

        if await self._existing(body) is not None:
            raise AlreadyLikedError(target.value)

        like = Like(
            user_id=self.user.id,
            post_id=None if comment_id else post_id,
            comment_id=comment_id,
        )
        self.db.add(like)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyLikedError(target.value)

        await NotificationService(self.db).notify(
            recipient_id=author_id,
            actor_id=self.user.id,
            notification_type=notification_type_for_like(target),
            post_id=post_id,
            comment_id=comment_id,
        )
        await self.db.commit()
        await self.db.refresh(like)
        logger.info(
            f"{target.value} liked",
            extra={
                "user_id": self.user.id,
                "post_id": str(post_id),
                "comment_id": str(comment_id) if comment_id else None,
            },
        )
        return serialize_like(like)

    async def unlike(
        self, post_id: UUID | None, comment_id: UUID | None,
    ) -> None:
        stmt = delete(Like).where(Like.user_id == self.user.id)
        if comment_id is not None:
            stmt = stmt.where(Like.comment_id == comment_id)
        else:
            stmt = stmt.where(Like.post_id == post_id, Like.comment_id.is_(None))
        await self.db.execute(stmt)
        await self.db.commit()

    async def _existing(self, body: LikeCreate) -> Like | None:
        stmt = select(Like).where(Like.user_id == self.user.id)
        if body.comment_id is not None:
            stmt = stmt.where(Like.comment_id == body.comment_id)
        else:
            stmt = stmt.where(
                Like.post_id == body.post_id, Like.comment_id.is_(None),
            )
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()
