"""Profile Service — profile pages, profile edits and the settings view.

Invariants:
    - Profile pages show only posts the viewer may see; stats count those posts
    - email is exposed only on the viewer's own profile
    - Edits upsert: the first write creates the row keyed by the session id
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import UnauthorizedError
from travel_map.core.post_view import iso_or_none, serialize_post
from travel_map.core.profile_stats import compute_profile_stats
from travel_map.core.user_info import fallback_name
from travel_map.models.comment import Comment
from travel_map.models.like import Like
from travel_map.models.user_profile import UserProfile
from travel_map.models.visited_place import VisitedPlace
from travel_map.schemas.profile import ProfileUpdate
from travel_map.services.post_queries import visible_to
from travel_map.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class ProfileService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.directory = UserDirectory(db)

    async def profile_page(
        self, viewer: SessionUser | None, target_user_id: str | None,
    ) -> dict:
        if not target_user_id:
            if viewer is None:
                raise UnauthorizedError("Sign in to view your profile")
            target_user_id = viewer.id
        is_own = viewer is not None and viewer.owns(target_user_id)

        profile = await self.directory.find_profile(target_user_id)
        result = await self.db.execute(
            select(VisitedPlace)
            .where(VisitedPlace.user_id == target_user_id, visible_to(viewer))
            .order_by(VisitedPlace.created_at.desc()),
        )
        posts = list(result.scalars().all())
        total_likes, total_comments = await self._social_totals(
            [p.id for p in posts],
        )

        own_image = viewer.image if is_own else None
        return {
            "user": {
                "id": target_user_id,
                "name": (
                    (profile.display_name if profile else None)
                    or fallback_name(target_user_id)
                ),
                "email": (viewer.email or target_user_id) if is_own else None,
                "image": (profile.avatar_url if profile else None) or own_image,
                "bio": profile.bio if profile else None,
            },
            "stats": compute_profile_stats(
                [p.county for p in posts], total_likes, total_comments,
            ),
            "posts": [serialize_post(p) for p in posts],
            "isOwnProfile": is_own,
        }

    async def update(self, user: SessionUser, body: ProfileUpdate) -> dict:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user.id),
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            profile = UserProfile(user_id=user.id, email=user.email)
            self.db.add(profile)
            logger.info("Profile created", extra={"user_id": user.id})
        for field, value in body.changes().items():
            setattr(profile, field, value)
        await self.db.commit()
        await self.db.refresh(profile)
        return serialize_profile(profile)

    async def settings_view(self, user: SessionUser) -> dict:
        """Identity provider values merged with the custom profile."""
        profile = await self.directory.find_profile(user.id)
        display_name = profile.display_name if profile else None
        avatar_url = profile.avatar_url if profile else None
        return {
            "email": user.email,
            "originalName": user.name,
            "originalImage": user.image,
            "displayName": display_name,
            "avatarUrl": avatar_url,
            "bio": profile.bio if profile else None,
            "finalName": display_name or user.name or fallback_name(
                user.email or user.id,
            ),
            "finalImage": avatar_url or user.image,
        }

    async def _social_totals(self, post_ids: list) -> tuple[int, int]:
        if not post_ids:
            return 0, 0
        likes = await self.db.execute(
            select(func.count(Like.id)).where(
                Like.post_id.in_(post_ids), Like.comment_id.is_(None),
            ),
        )
        comments = await self.db.execute(
            select(func.count(Comment.id)).where(Comment.post_id.in_(post_ids)),
        )
        return likes.scalar_one(), comments.scalar_one()


def serialize_profile(profile: UserProfile) -> dict:
    return {
        "id": str(profile.id),
        "user_id": profile.user_id,
        "display_name": profile.display_name,
        "avatar_url": profile.avatar_url,
        "bio": profile.bio,
        "created_at": iso_or_none(profile.created_at),
        "updated_at": iso_or_none(profile.updated_at),
    }
