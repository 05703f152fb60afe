"""Post Enrichment — attaches the social graph (likes, comments, authors) to posts.

Invariants:
    - likes_count counts post likes only (comment_id IS NULL)
    - is_liked is always False for guests
    - Comment previews are the oldest N comments of each post, oldest first
    - Query count is constant per call, independent of the number of posts

Design Decisions:
    - Grouped COUNT queries and one window-function query replace per-post
      round trips
    - Returns plain dicts: routes serialize them as-is
"""

import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.domain_types import SessionUser
from travel_map.core.post_view import serialize_comment, serialize_post
from travel_map.models.comment import Comment
from travel_map.models.like import Like
from travel_map.models.visited_place import VisitedPlace
from travel_map.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class PostEnricher:
    """Builds feed-ready post and comment dicts for one viewer."""

    def __init__(self, db: AsyncSession, viewer: SessionUser | None):
        self.db = db
        self.viewer = viewer
        self.directory = UserDirectory(db)

    async def enrich(
        self, posts: list[VisitedPlace], comment_limit: int | None = 3,
    ) -> list[dict]:
        if not posts:
            return []
        post_ids = [p.id for p in posts]

        like_counts = await self._post_like_counts(post_ids)
        liked = await self._posts_liked_by_viewer(post_ids)
        comment_counts = await self._comment_counts(post_ids)
        comments = await self._comments_for(post_ids, comment_limit)

        all_comments = [c for group in comments.values() for c in group]
        comment_social = await self._comment_social([c.id for c in all_comments])
        cards = await self.directory.user_cards(
            [p.user_id for p in posts] + [c.user_id for c in all_comments],
            self.viewer,
        )

        return [
            {
                **serialize_post(post),
                "likes_count": like_counts.get(post.id, 0),
                "is_liked": post.id in liked,
                "comments_count": comment_counts.get(post.id, 0),
                "comments": [
                    self._comment_dict(c, comment_social, cards)
                    for c in comments.get(post.id, [])
                ],
                "user": cards[post.user_id],
            }
            for post in posts
        ]

    async def enrich_comments(self, comments: list[Comment]) -> list[dict]:
        """Comment dicts with like counts and author cards."""
        if not comments:
            return []
        social = await self._comment_social([c.id for c in comments])
        cards = await self.directory.user_cards(
            [c.user_id for c in comments], self.viewer,
        )
        return [self._comment_dict(c, social, cards) for c in comments]

    @staticmethod
    def _comment_dict(
        comment: Comment,
        social: tuple[dict[UUID, int], set[UUID]],
        cards: dict[str, dict],
    ) -> dict:
        counts, liked = social
        return {
            **serialize_comment(comment),
            "likes_count": counts.get(comment.id, 0),
            "is_liked": comment.id in liked,
            "user": cards[comment.user_id],
        }

    async def _post_like_counts(self, post_ids: list[UUID]) -> dict[UUID, int]:
        result = await self.db.execute(
            select(Like.post_id, func.count(Like.id))
            .where(Like.post_id.in_(post_ids), Like.comment_id.is_(None))
            .group_by(Like.post_id),
        )
        return {post_id: count for post_id, count in result.all()}

    async def _posts_liked_by_viewer(self, post_ids: list[UUID]) -> set[UUID]:
        if self.viewer is None:
            return set()
        result = await self.db.execute(
            select(Like.post_id).where(
                Like.post_id.in_(post_ids),
                Like.comment_id.is_(None),
                Like.user_id == self.viewer.id,
            ),
        )
        return set(result.scalars().all())

    async def _comment_counts(self, post_ids: list[UUID]) -> dict[UUID, int]:
        result = await self.db.execute(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(post_ids))
            .group_by(Comment.post_id),
        )
        return {post_id: count for post_id, count in result.all()}

    async def _comments_for(
        self, post_ids: list[UUID], limit: int | None,
    ) -> dict[UUID, list[Comment]]:
        if limit is None:
            stmt = (
                select(Comment)
                .where(Comment.post_id.in_(post_ids))
                .order_by(Comment.created_at.asc(), Comment.id)
            )
        else:
            position = (
                func.row_number()
                .over(
                    partition_by=Comment.post_id,
                    order_by=(Comment.created_at.asc(), Comment.id),
                )
                .label("position")
            )
            ranked = (
                select(Comment.id, position)
                .where(Comment.post_id.in_(post_ids))
                .subquery()
            )
            stmt = (
                select(Comment)
                .join(ranked, Comment.id == ranked.c.id)
                .where(ranked.c.position <= limit)
                .order_by(Comment.created_at.asc(), Comment.id)
            )
        result = await self.db.execute(stmt)
        grouped: dict[UUID, list[Comment]] = defaultdict(list)
        for comment in result.scalars().all():
            grouped[comment.post_id].append(comment)
        return grouped

    async def _comment_social(
        self, comment_ids: list[UUID],
    ) -> tuple[dict[UUID, int], set[UUID]]:
        if not comment_ids:
            return {}, set()
        result = await self.db.execute(
            select(Like.comment_id, func.count(Like.id))
            .where(Like.comment_id.in_(comment_ids))
            .group_by(Like.comment_id),
        )
        counts = {comment_id: count for comment_id, count in result.all()}
        liked: set[UUID] = set()
        if self.viewer is not None:
            result = await self.db.execute(
                select(Like.comment_id).where(
                    Like.comment_id.in_(comment_ids),
                    Like.user_id == self.viewer.id,
                ),
            )
            liked = set(result.scalars().all())
        return counts, liked
