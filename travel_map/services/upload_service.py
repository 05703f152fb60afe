"""Upload Service — photo uploads to object storage.

Invariants:
    - Every stored file passed check_image (image/*, within the size limit)
    - Single uploads only write to allowed buckets and may overwrite (upsert)
    - Batch uploads never overwrite and never abort on a single bad file;
      they fail as a whole only when no file was stored
    - Returned URLs are public URLs of the stored objects

Design Decisions:
    - Files arrive as IncomingFile so the service has no FastAPI dependency
    - Batch errors are per-file strings, reported next to the successes
"""

import logging
from dataclasses import dataclass

from travel_map.core.domain_types import SessionUser
from travel_map.core.errors import InvalidRequestError, StorageError
from travel_map.core.upload_rules import (
    BUCKET_MIME_TYPES,
    MAX_BATCH_COUNT,
    MAX_BATCH_FILE_BYTES,
    MAX_SINGLE_FILE_BYTES,
    batch_object_name,
    check_image,
    single_object_name,
)
from travel_map.infrastructure.storage_client import StorageClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    filename: str | None
    content_type: str | None
    content: bytes


class UploadService:
    """Validates and stores uploaded images for the signed-in user."""

    def __init__(
        self,
        storage: StorageClient,
        user: SessionUser,
        default_bucket: str,
        allowed_buckets: list[str],
    ):
        self.storage = storage
        self.user = user
        self.default_bucket = default_bucket
        self.allowed_buckets = allowed_buckets

    async def upload_single(
        self, file: IncomingFile, bucket: str | None = None,
        path: str | None = None,
    ) -> dict:
        bucket = bucket or self.default_bucket
        if bucket not in self.allowed_buckets:
            raise InvalidRequestError(
                f"Bucket '{bucket}' is not allowed", field="bucket",
            )
        reason = check_image(
            file.content_type, len(file.content), MAX_SINGLE_FILE_BYTES,
        )
        if reason:
            raise InvalidRequestError(reason, field="file")

        object_path = path or single_object_name(file.filename)
        stored = await self.storage.upload(
            bucket, object_path, file.content, file.content_type, upsert=True,
        )
        url = self.storage.public_url(bucket, stored)
        logger.info(
            "Image uploaded",
            extra={"user_id": self.user.id, "bucket": bucket, "object_path": stored},
        )
        return {"url": url, "publicUrl": url, "path": stored, "bucket": bucket}

    async def upload_many(self, files: list[IncomingFile]) -> dict:
        if not files:
            raise InvalidRequestError("At least one image is required", field="files")
        if len(files) > MAX_BATCH_COUNT:
            raise InvalidRequestError(
                f"At most {MAX_BATCH_COUNT} images per upload", field="files",
            )

        results: list[dict] = []
        errors: list[str] = []
        for index, file in enumerate(files):
            label = f"file {index + 1}"
            reason = check_image(
                file.content_type, len(file.content), MAX_BATCH_FILE_BYTES,
            )
            if reason:
                errors.append(f"{label}: {reason}")
                continue
            object_path = batch_object_name(self.user.id, file.filename)
            try:
                stored = await self.storage.upload(
                    self.default_bucket, object_path, file.content,
                    file.content_type, upsert=False,
                )
            except StorageError as e:
                errors.append(f"{label}: {e.reason}")
                continue
            results.append({
                "index": index,
                "fileName": file.filename,
                "url": self.storage.public_url(self.default_bucket, stored),
                "path": stored,
            })

        if not results:
            logger.error(
                f"All {len(files)} uploads failed",
                extra={"user_id": self.user.id, "bucket": self.default_bucket},
            )
            raise StorageError("all image uploads failed", details=errors)

        logger.info(
            f"Uploaded {len(results)}/{len(files)} images",
            extra={"user_id": self.user.id, "bucket": self.default_bucket},
        )
        return {
            "success": True,
            "uploadedCount": len(results),
            "totalCount": len(files),
            "urls": [r["url"] for r in results],
            "results": results,
            "errors": errors or None,
        }

    async def ensure_bucket(self) -> bool:
        """Create the default bucket when missing. Returns True if created."""
        buckets = await self.storage.list_buckets()
        if any(b.get("name") == self.default_bucket for b in buckets):
            return False
        await self.storage.create_bucket(
            self.default_bucket,
            public=True,
            file_size_limit=MAX_SINGLE_FILE_BYTES,
            allowed_mime_types=BUCKET_MIME_TYPES,
        )
        return True
