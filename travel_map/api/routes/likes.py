"""Like Routes — like and unlike posts or comments.

Invariants:
    - Every endpoint requires a session
    - A second like on the same target is 409
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.api.dependencies import get_current_user
from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import InvalidRequestError
from travel_map.infrastructure.database import get_db
from travel_map.schemas.social import LikeCreate
from travel_map.services.like_service import LikeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/social/likes", tags=["likes"])


@router.get("")
async def list_likes(
    post_id: UUID = Query(...),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    likes = await LikeService(db, user).list_post_likes(post_id)
    return {"success": True, "data": likes, "count": len(likes)}


@router.post("")
async def create_like(
    body: LikeCreate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    like = await LikeService(db, user).like(body)
    return {"success": True, "data": like}


@router.delete("")
async def delete_like(
    post_id: UUID | None = Query(None),
    comment_id: UUID | None = Query(None),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if post_id is None and comment_id is None:
        raise InvalidRequestError("Either post_id or comment_id is required")
    await LikeService(db, user).unlike(post_id, comment_id)
    return {"success": True}
