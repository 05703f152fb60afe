"""Visited Routes — the signed-in user's own travel records.

Invariants:
    - Every endpoint requires a session (401 otherwise)
    - Only the owner may update or delete (403), missing ids are 404
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.api.dependencies import get_current_user
from travel_map.core.domain_types import SessionUser
from travel_map.infrastructure.database import get_db
from travel_map.schemas.visited import VisitedPlaceCreate, VisitedPlaceUpdate
from travel_map.services.visited_service import VisitedService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/content/visited", tags=["visited"])


@router.get("")
async def list_visited(
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    places = await VisitedService(db, user).list_own()
    return {"success": True, "data": places, "count": len(places)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_visited(
    body: VisitedPlaceCreate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    place = await VisitedService(db, user).create(body)
    return {"success": True, "data": place}


@router.put("/{place_id}")
async def update_visited(
    place_id: UUID,
    body: VisitedPlaceUpdate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    place = await VisitedService(db, user).update(place_id, body)
    return {"success": True, "data": place}


@router.delete("/{place_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_visited(
    place_id: UUID,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await VisitedService(db, user).delete(place_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
