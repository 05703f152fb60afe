"""Storage Routes — image uploads and bucket setup.

Invariants:
    - Every endpoint requires a session
    - Files are read fully into memory; size limits are checked on the bytes
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from travel_map.api.dependencies import get_current_user
from travel_map.config import Settings, get_settings
from travel_map.core.domain_types import SessionUser
from travel_map.infrastructure.storage_client import StorageClient, get_storage
from travel_map.services.upload_service import IncomingFile, UploadService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/storage", tags=["storage"])


def _service(
    user: SessionUser = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    return UploadService(
        storage, user,
        default_bucket=settings.storage_default_bucket,
        allowed_buckets=settings.storage_allowed_buckets,
    )


async def _read(upload: UploadFile) -> IncomingFile:
    return IncomingFile(
        filename=upload.filename,
        content_type=upload.content_type,
        content=await upload.read(),
    )


@router.post("/upload")
async def upload_file(
    file: UploadFile = File(...),
    bucket: str | None = Form(None),
    path: str | None = Form(None),
    service: UploadService = Depends(_service),
):
    result = await service.upload_single(await _read(file), bucket=bucket, path=path)
    return {"success": True, "data": result}


@router.post("/upload-multiple")
async def upload_files(
    files: list[UploadFile] = File(...),
    service: UploadService = Depends(_service),
):
    return await service.upload_many([await _read(f) for f in files])


@router.post("/setup")
async def setup_storage(service: UploadService = Depends(_service)):
    created = await service.ensure_bucket()
    return {"success": True, "created": created}
