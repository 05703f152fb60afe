"""Comment Routes — list, add, edit and delete comments on posts.

Invariants:
    - Every endpoint requires a session
    - Edit is author-only; delete is author or post owner (403 otherwise)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.api.dependencies import get_current_user
from travel_map.core.domain_types import SessionUser
from travel_map.infrastructure.database import get_db
from travel_map.schemas.social import CommentCreate, CommentUpdate
from travel_map.services.comment_service import CommentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/social/comments", tags=["comments"])


@router.get("")
async def list_comments(
    post_id: UUID = Query(...),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comments = await CommentService(db, user).list_for_post(post_id)
    return {"success": True, "data": comments, "count": len(comments)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_comment(
    body: CommentCreate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db, user).create(body)
    return {"success": True, "data": comment}


@router.put("/{comment_id}")
async def update_comment(
    comment_id: UUID,
    body: CommentUpdate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db, user).update(comment_id, body)
    return {"success": True, "data": comment}


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: UUID,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CommentService(db, user).delete(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
