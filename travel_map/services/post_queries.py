"""Post Queries — feed, single post, search and per-county counts, all visibility-filtered.

Invariants:
    - Guests see public posts only; signed-in users see public posts plus their own
    - County filters match every stored spelling of the reconciled county
    - Search matches note text or any county spelling the query implies
    - Results are newest first

Design Decisions:
    - Visibility is a SQL predicate, never a post-fetch filter, so limits stay exact
    - LIKE wildcards in user input are escaped; the query is a substring, not a pattern
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.core.counties import (
    county_search_terms, list_counties, stored_names_for, to_short_name,
)
from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import ForbiddenError, ResourceNotFoundError
from travel_map.core.post_view import with_search_fields
from travel_map.models.visited_place import VisitedPlace
from travel_map.services.post_enrichment import PostEnricher

logger = logging.getLogger(__name__)

FEED_COMMENT_PREVIEW = 3
SEARCH_COMMENT_PREVIEW = 5
SEARCH_RESULT_LIMIT = 50


def escape_like(term: str) -> str:
    return (
        term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


def visible_to(viewer: SessionUser | None):
    """SQL predicate for posts the viewer may read."""
    if viewer is None:
        return VisitedPlace.is_public == true()
    return or_(
        VisitedPlace.is_public == true(),
        VisitedPlace.user_id.in_(viewer.owner_ids),
    )


def can_view(post: VisitedPlace, viewer: SessionUser | None) -> bool:
    return post.is_public or (viewer is not None and viewer.owns(post.user_id))


class PostQueries:
    """Read side of the feed for a single viewer."""

    def __init__(self, db: AsyncSession, viewer: SessionUser | None):
        self.db = db
        self.viewer = viewer
        self.enricher = PostEnricher(db, viewer)

    async def list_posts(
        self, county: str | None = None, user_id: str | None = None,
    ) -> list[dict]:
        stmt = (
            select(VisitedPlace)
            .where(visible_to(self.viewer))
            .order_by(VisitedPlace.created_at.desc())
        )
        if user_id:
            stmt = stmt.where(VisitedPlace.user_id == user_id)
        if county:
            short = to_short_name(county)
            names = stored_names_for(short) if short else [county]
            stmt = stmt.where(VisitedPlace.county.in_(names))

        result = await self.db.execute(stmt)
        posts = list(result.scalars().all())
        return await self.enricher.enrich(posts, FEED_COMMENT_PREVIEW)

    async def get_visible_post(self, post_id: UUID) -> VisitedPlace:
        """Post by id, or 404 if missing and 403 if private to someone else."""
        post = await self.db.get(VisitedPlace, post_id)
        if post is None:
            raise ResourceNotFoundError("Post", str(post_id))
        if not can_view(post, self.viewer):
            raise ForbiddenError("You do not have permission to view this post")
        return post

    async def get_post(self, post_id: UUID) -> dict:
        post = await self.get_visible_post(post_id)
        enriched = await self.enricher.enrich([post], comment_limit=None)
        return enriched[0]

    async def search(self, term: str) -> list[dict]:
        term = term.strip()
        if not term:
            return []
        conditions = [
            VisitedPlace.note.ilike(f"%{escape_like(term)}%", escape="\\"),
        ]
        for spelling in county_search_terms(term):
            conditions.append(
                VisitedPlace.county.ilike(f"%{escape_like(spelling)}%", escape="\\"),
            )
        result = await self.db.execute(
            select(VisitedPlace)
            .where(visible_to(self.viewer), or_(*conditions))
            .order_by(VisitedPlace.created_at.desc())
            .limit(SEARCH_RESULT_LIMIT),
        )
        posts = list(result.scalars().all())
        logger.info(
            f"Search '{term}' matched {len(posts)} posts",
            extra={"user_id": self.viewer.id if self.viewer else None},
        )
        enriched = await self.enricher.enrich(posts, SEARCH_COMMENT_PREVIEW)
        return [with_search_fields(p) for p in enriched]

    async def county_overview(self) -> list[dict]:
        """County catalogue with the number of visible posts in each."""
        result = await self.db.execute(
            select(VisitedPlace.county, func.count(VisitedPlace.id))
            .where(visible_to(self.viewer))
            .group_by(VisitedPlace.county),
        )
        counts: dict[str, int] = {}
        for stored_name, count in result.all():
            short = to_short_name(stored_name)
            if short is None:
                logger.warning(f"Unrecognized county in storage: {stored_name}")
                continue
            counts[short] = counts.get(short, 0) + count
        return [
            {**county, "post_count": counts.get(county["name"], 0)}
            for county in list_counties()
        ]
