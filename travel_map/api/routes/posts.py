"""Post Routes — the public feed, single posts and the county map counts.

Invariants:
    - Guests allowed; visibility is decided by PostQueries, never here
    - Private posts of other users are 403 on direct access
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.api.dependencies import get_optional_user
from travel_map.core.domain_types import SessionUser
from travel_map.infrastructure.database import get_db
from travel_map.services.post_queries import PostQueries

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/content", tags=["posts"])


@router.get("/posts")
async def list_posts(
    county: str | None = Query(None),
    user_id: str | None = Query(None, alias="userId"),
    viewer: SessionUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    posts = await PostQueries(db, viewer).list_posts(county=county, user_id=user_id)
    return {"success": True, "data": posts, "count": len(posts)}


@router.get("/posts/{post_id}")
async def get_post(
    post_id: UUID,
    viewer: SessionUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    post = await PostQueries(db, viewer).get_post(post_id)
    return {"success": True, "data": post}


@router.get("/counties")
async def list_counties(
    viewer: SessionUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    counties = await PostQueries(db, viewer).county_overview()
    return {"success": True, "data": counties}
