"""Comment Service — comments on visited places.

Invariants:
    - Comments can only be added to existing posts (404 otherwise)
    - Only the author edits a comment; the author or the post owner deletes it
    - Deleting a comment removes its likes and notifications with it
    - Commenting notifies the post owner in the same transaction
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.domain_types import NotificationType, SessionUser
from travel_map.core.errors import ForbiddenError, ResourceNotFoundError
from travel_map.models.comment import Comment
from travel_map.models.visited_place import VisitedPlace
from travel_map.schemas.social import CommentCreate, CommentUpdate
from travel_map.services.notification_service import NotificationService
from travel_map.services.post_enrichment import PostEnricher

logger = logging.getLogger(__name__)


class CommentService:
    """Comment operations for the signed-in user."""

    def __init__(self, db: AsyncSession, user: SessionUser):
        self.db = db
        self.user = user
        self.enricher = PostEnricher(db, user)

    async def list_for_post(self, post_id: UUID) -> list[dict]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id),
        )
        return await self.enricher.enrich_comments(list(result.scalars().all()))

    async def create(self, body: CommentCreate) -> dict:
        post = await self.db.get(VisitedPlace, body.post_id)
        if post is None:
            raise ResourceNotFoundError("Post", str(body.post_id))

        comment = Comment(
            post_id=post.id, user_id=self.user.id, content=body.content,
        )
        self.db.add(comment)
        await self.db.flush()
        await NotificationService(self.db).notify(
            recipient_id=post.user_id,
            actor_id=self.user.id,
            notification_type=NotificationType.COMMENT_POST,
            post_id=post.id,
            comment_id=comment.id,
        )
        await self.db.commit()
        await self.db.refresh(comment)
        logger.info(
            "Comment added",
            extra={
                "user_id": self.user.id,
                "post_id": str(post.id),
                "comment_id": str(comment.id),
            },
        )
        return (await self.enricher.enrich_comments([comment]))[0]

    async def update(self, comment_id: UUID, body: CommentUpdate) -> dict:
        comment = await self._get(comment_id)
        if not self.user.owns(comment.user_id):
            raise ForbiddenError("You can only edit your own comments")
        comment.content = body.content
        await self.db.commit()
        await self.db.refresh(comment)
        return (await self.enricher.enrich_comments([comment]))[0]

    async def delete(self, comment_id: UUID) -> None:
        comment = await self._get(comment_id)
        if not self.user.owns(comment.user_id):
            post = await self.db.get(VisitedPlace, comment.post_id)
            if post is None or not self.user.owns(post.user_id):
                raise ForbiddenError(
                    "Only the comment author or the post owner can delete it",
                )
        await self.db.delete(comment)
        await self.db.commit()
        logger.info(
            "Comment deleted",
            extra={"user_id": self.user.id, "comment_id": str(comment_id)},
        )

    async def _get(self, comment_id: UUID) -> Comment:
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise ResourceNotFoundError("Comment", str(comment_id))
        return comment
