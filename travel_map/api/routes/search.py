"""Search Route — free-text search over notes and county names.

Invariants:
    - A blank query returns an empty result, never an error
    - Chinese and English county spellings find each other's posts
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.api.dependencies import get_optional_user
from travel_map.core.domain_types import SessionUser
from travel_map.infrastructure.database import get_db
from travel_map.services.post_queries import PostQueries

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/content", tags=["search"])


@router.get("/search")
async def search_posts(
    q: str = Query(""),
    viewer: SessionUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    results = await PostQueries(db, viewer).search(q)
    return {"success": True, "data": results, "count": len(results)}
