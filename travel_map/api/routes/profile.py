"""Profile Routes — profile pages, profile edits and the settings view.

Invariants:
    - GET /profile without userId requires a session (401 for guests)
    - PUT /profile, GET and PUT /user-profile require a session
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from travel_map.api.dependencies import get_current_user, get_optional_user
from travel_map.core.domain_types import SessionUser
from travel_map.infrastructure.database import get_db
from travel_map.schemas.profile import ProfileUpdate
from travel_map.services.profile_service import ProfileService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/user", tags=["profile"])


@router.get("/profile")
async def get_profile(
    user_id: str | None = Query(None, alias="userId"),
    viewer: SessionUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    page = await ProfileService(db).profile_page(viewer, user_id)
    return {"success": True, "data": page}


@router.put("/profile")
async def update_profile(
    body: ProfileUpdate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await ProfileService(db).update(user, body)
    return {"success": True, "data": profile}


@router.get("/user-profile")
async def get_settings_view(
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    view = await ProfileService(db).settings_view(user)
    return {"success": True, "data": view}


@router.put("/user-profile")
async def update_settings_view(
    body: ProfileUpdate,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Save from the profile settings form; same upsert as PUT /profile."""
    profile = await ProfileService(db).update(user, body)
    return {"success": True, "data": profile}
