"""User Directory — profile lookups keyed by user id, with the legacy email fallback.

Invariants:
    - Lookup order is user_id first, then email (rows from before ids were
      unified are keyed by email)
    - Batch lookups issue one query regardless of how many ids are asked for
    - Missing profiles are simply absent from results (callers fall back)
"""

import logging
from collections.abc import Iterable

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.domain_types import SessionUser
from travel_map.core.user_info import build_user_info
from travel_map.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


class UserDirectory:
    """Resolves user ids to profiles and author cards."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_profile(self, user_id: str) -> UserProfile | None:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id),
        )
        profile = result.scalar_one_or_none()
        if profile:
            return profile
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.email == user_id).limit(1),
        )
        return result.scalars().first()

    async def profiles_for(self, user_ids: Iterable[str]) -> dict[str, UserProfile]:
        ids = {uid for uid in user_ids if uid}
        if not ids:
            return {}
        result = await self.db.execute(
            select(UserProfile).where(
                or_(UserProfile.user_id.in_(ids), UserProfile.email.in_(ids)),
            ),
        )
        by_id: dict[str, UserProfile] = {}
        by_email: dict[str, UserProfile] = {}
        for profile in result.scalars().all():
            if profile.user_id in ids:
                by_id[profile.user_id] = profile
            if profile.email in ids:
                by_email.setdefault(profile.email, profile)
        return {
            uid: by_id.get(uid) or by_email[uid]
            for uid in ids
            if uid in by_id or uid in by_email
        }

    async def user_cards(
        self, user_ids: Iterable[str], viewer: SessionUser | None,
    ) -> dict[str, dict]:
        ids = set(user_ids)
        profiles = await self.profiles_for(ids)
        return {
            uid: build_user_info(uid, profiles.get(uid), viewer) for uid in ids
        }
