"""Notification Service — fan-out of like/comment activity and the recipient's inbox.

Invariants:
    - notify() never notifies actors about their own actions
    - notify() suppresses repeats inside the duplicate window (notification_policy)
    - notify() only stages the row; the caller's commit makes it durable,
      so a rolled-back like or comment leaves no notification behind
    - Inbox reads, updates and deletes are scoped to the caller's own rows

Design Decisions:
    - actor_name captured at creation: the inbox renders without a profile join
    - hasMore is "page came back full", matching the infinite-scroll client
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.domain_types import NotificationType, SessionUser
from travel_map.core.notification_policy import duplicate_cutoff, is_self_action
from travel_map.core.post_view import iso_or_none
from travel_map.core.user_info import fallback_name, resolve_actor_name
from travel_map.models.comment import Comment
from travel_map.models.notification import Notification
from travel_map.models.visited_place import VisitedPlace
from travel_map.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class NotificationService:
    """Creates notifications and serves a user's inbox."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.directory = UserDirectory(db)

    async def notify(
        self,
        recipient_id: str,
        actor_id: str,
        notification_type: NotificationType,
        post_id: UUID | None = None,
        comment_id: UUID | None = None,
    ) -> Notification | None:
        """Stage a notification, or return None when policy skips it."""
        if is_self_action(recipient_id, actor_id):
            return None
        if await self._has_recent_duplicate(
            recipient_id, actor_id, notification_type, post_id, comment_id,
        ):
            logger.info(
                f"Duplicate {notification_type.value} notification skipped",
                extra={"user_id": recipient_id},
            )
            return None

        profile = await self.directory.find_profile(actor_id)
        notification = Notification(
            user_id=recipient_id,
            actor_id=actor_id,
            actor_name=resolve_actor_name(actor_id, profile),
            type=notification_type.value,
            post_id=post_id,
            comment_id=comment_id,
            is_read=False,
        )
        self.db.add(notification)
        return notification

    async def _has_recent_duplicate(
        self,
        recipient_id: str,
        actor_id: str,
        notification_type: NotificationType,
        post_id: UUID | None,
        comment_id: UUID | None,
    ) -> bool:
        stmt = select(Notification.id).where(
            Notification.user_id == recipient_id,
            Notification.actor_id == actor_id,
            Notification.type == notification_type.value,
            Notification.created_at >= duplicate_cutoff(),
        )
        stmt = stmt.where(
            Notification.post_id == post_id if post_id is not None
            else Notification.post_id.is_(None),
        )
        stmt = stmt.where(
            Notification.comment_id == comment_id if comment_id is not None
            else Notification.comment_id.is_(None),
        )
        result = await self.db.execute(stmt.limit(1))
        return result.first() is not None

    async def inbox(
        self, user: SessionUser, page: int, limit: int, unread_only: bool,
    ) -> dict:
        stmt = select(Notification).where(Notification.user_id == user.id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = (
            stmt.order_by(Notification.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        notifications = list(result.scalars().all())

        posts = await self._posts_by_id(
            {n.post_id for n in notifications if n.post_id},
        )
        comments = await self._comments_by_id(
            {n.comment_id for n in notifications if n.comment_id},
        )
        profiles = await self.directory.profiles_for(
            n.actor_id for n in notifications
        )

        unread = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user.id,
                Notification.is_read.is_(False),
            ),
        )
        return {
            "data": [
                self._inbox_entry(n, posts, comments, profiles)
                for n in notifications
            ],
            "pagination": {
                "page": page,
                "limit": limit,
                "hasMore": len(notifications) == limit,
            },
            "unreadCount": unread.scalar_one(),
        }

    async def mark_read(
        self, user: SessionUser, notification_ids: list[UUID] | None,
        mark_all: bool,
    ) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user.id)
            .where(Notification.is_read.is_(False))
            .values(is_read=True)
        )
        if not mark_all:
            if not notification_ids:
                return 0
            stmt = stmt.where(Notification.id.in_(notification_ids))
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount

    async def delete(self, user: SessionUser, notification_ids: list[UUID]) -> int:
        if not notification_ids:
            return 0
        result = await self.db.execute(
            delete(Notification).where(
                Notification.user_id == user.id,
                Notification.id.in_(notification_ids),
            ),
        )
        await self.db.commit()
        return result.rowcount

    async def _posts_by_id(self, post_ids: set[UUID]) -> dict[UUID, VisitedPlace]:
        if not post_ids:
            return {}
        result = await self.db.execute(
            select(VisitedPlace).where(VisitedPlace.id.in_(post_ids)),
        )
        return {p.id: p for p in result.scalars().all()}

    async def _comments_by_id(self, comment_ids: set[UUID]) -> dict[UUID, Comment]:
        if not comment_ids:
            return {}
        result = await self.db.execute(
            select(Comment).where(Comment.id.in_(comment_ids)),
        )
        return {c.id: c for c in result.scalars().all()}

    @staticmethod
    def _inbox_entry(
        notification: Notification,
        posts: dict[UUID, VisitedPlace],
        comments: dict[UUID, Comment],
        profiles: dict,
    ) -> dict:
        post = posts.get(notification.post_id) if notification.post_id else None
        comment = (
            comments.get(notification.comment_id)
            if notification.comment_id else None
        )
        profile = profiles.get(notification.actor_id)
        return {
            "id": str(notification.id),
            "user_id": notification.user_id,
            "actor_id": notification.actor_id,
            "actor_name": notification.actor_name,
            "type": notification.type,
            "post_id": str(notification.post_id) if notification.post_id else None,
            "comment_id": (
                str(notification.comment_id) if notification.comment_id else None
            ),
            "content": notification.content,
            "is_read": notification.is_read,
            "created_at": iso_or_none(notification.created_at),
            "post": {
                "id": str(post.id),
                "county": post.county,
                "note": post.note,
                "image_url": post.image_url,
                "image_urls": list(post.image_urls or []),
            } if post else None,
            "comment": {
                "id": str(comment.id),
                "content": comment.content,
            } if comment else None,
            "actor": {
                "id": notification.actor_id,
                "name": (
                    (profile.display_name if profile else None)
                    or fallback_name(notification.actor_id)
                ),
                "image": profile.avatar_url if profile else None,
            },
        }
