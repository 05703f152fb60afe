"""Notification Routes — the signed-in user's inbox.

Invariants:
    - Every endpoint requires a session and touches only the caller's rows
    - PATCH needs markAllRead or notificationIds; DELETE needs notificationIds
"""

import logging

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.api.dependencies import get_current_user
from travel_map.core.domain_types import SessionUser
from travel_map.infrastructure.database import get_db
from travel_map.schemas.social import NotificationDelete, NotificationMarkRead
from travel_map.services.notification_service import NotificationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/social/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    inbox = await NotificationService(db).inbox(user, page, limit, unread_only)
    return {"success": True, **inbox}


@router.patch("")
async def mark_notifications_read(
    body: NotificationMarkRead,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await NotificationService(db).mark_read(
        user, body.notification_ids, body.mark_all_read,
    )
    return {"success": True, "updated": updated}


@router.delete("")
async def delete_notifications(
    body: NotificationDelete = Body(...),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deleted = await NotificationService(db).delete(user, body.notification_ids)
    return {"success": True, "deleted": deleted}
