"""Visited Service — the owner's write side of travel records.

Invariants:
    - Only the owner may update or delete a record (403 otherwise, 404 if missing)
    - image_url / image_urls are reconciled on every write (post_view.normalize_images)
    - Deleting a record deletes its comments, likes and notifications

Design Decisions:
    - Own-record listing falls back to rows keyed by email when none are keyed
      by the session id (accounts created before ids were unified)
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import ForbiddenError, ResourceNotFoundError
from travel_map.core.post_view import normalize_images, serialize_post
from travel_map.models.visited_place import VisitedPlace
from travel_map.schemas.visited import VisitedPlaceCreate, VisitedPlaceUpdate
from travel_map.services.post_enrichment import PostEnricher
from travel_map.services.post_queries import FEED_COMMENT_PREVIEW

logger = logging.getLogger(__name__)


class VisitedService:
    """Create, list, update and delete the caller's own travel records."""

    def __init__(self, db: AsyncSession, user: SessionUser):
        self.db = db
        self.user = user

    async def create(self, body: VisitedPlaceCreate) -> dict:
        image_url, image_urls = normalize_images(body.image_url, body.image_urls)
        place = VisitedPlace(
            user_id=self.user.id,
            county=body.county,
            note=body.note,
            ig_url=body.ig_url,
            image_url=image_url,
            image_urls=image_urls,
            is_public=body.is_public,
        )
        self.db.add(place)
        await self.db.commit()
        await self.db.refresh(place)
        logger.info(
            f"Visit to {place.county} recorded",
            extra={"user_id": self.user.id, "post_id": str(place.id)},
        )
        return serialize_post(place)

    async def list_own(self) -> list[dict]:
        places = await self._places_of(self.user.id)
        if not places and self.user.email and self.user.email != self.user.id:
            places = await self._places_of(self.user.email)
        enricher = PostEnricher(self.db, self.user)
        return await enricher.enrich(places, FEED_COMMENT_PREVIEW)

    async def update(self, place_id: UUID, body: VisitedPlaceUpdate) -> dict:
        place = await self.get_owned(place_id)
        changes = body.model_dump(exclude_unset=True)
        if "image_urls" in changes or "image_url" in changes:
            place.image_url, place.image_urls = normalize_images(
                changes.pop("image_url", None), changes.pop("image_urls", None),
            )
        for field, value in changes.items():
            if field == "is_public" and value is None:
                continue
            if field == "county" and value is None:
                continue
            setattr(place, field, value)
        await self.db.commit()
        await self.db.refresh(place)
        return serialize_post(place)

    async def delete(self, place_id: UUID) -> None:
        place = await self.get_owned(place_id)
        await self.db.delete(place)
        await self.db.commit()
        logger.info(
            "Visit deleted",
            extra={"user_id": self.user.id, "post_id": str(place_id)},
        )

    async def get_owned(self, place_id: UUID) -> VisitedPlace:
        place = await self.db.get(VisitedPlace, place_id)
        if place is None:
            raise ResourceNotFoundError("Post", str(place_id))
        if not self.user.owns(place.user_id):
            raise ForbiddenError("You can only modify your own posts")
        return place

    async def _places_of(self, owner_id: str) -> list[VisitedPlace]:
        result = await self.db.execute(
            select(VisitedPlace)
            .where(VisitedPlace.user_id == owner_id)
            .order_by(VisitedPlace.created_at.desc()),
        )
        return list(result.scalars().all())