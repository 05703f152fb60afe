"""Upload Rules — image limits and object naming for the photo uploads.

Invariants:
    - Only image/* content types are accepted
    - Single uploads: max 5 MB; batch uploads: max 10 files, 10 MB each
    - Generated object names never collide within a user's folder
    - Pure: randomness and clock are injectable for tests
"""

import random
import string
import time
import uuid

MAX_SINGLE_FILE_BYTES = 5 * 1024 * 1024
MAX_BATCH_FILE_BYTES = 10 * 1024 * 1024
MAX_BATCH_COUNT = 10
BUCKET_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/jpg"]


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return "bin"
    return filename.rsplit(".", 1)[1].lower() or "bin"


def check_image(
    content_type: str | None, size: int, max_bytes: int,
) -> str | None:
    """Return the rejection reason, or None when the file is acceptable."""
    if not content_type or not content_type.startswith("image/"):
        return "not a valid image format"
    if size > max_bytes:
        return f"file size exceeds {max_bytes // (1024 * 1024)}MB"
    if size == 0:
        return "file is empty"
    return None


def single_object_name(filename: str | None) -> str:
    return f"{uuid.uuid4().hex}.{file_extension(filename)}"


def batch_object_name(
    owner: str, filename: str | None,
    now_ms: int | None = None, rng: random.Random | None = None,
) -> str:
    """<owner>/<millis>_<random>.<ext>, matching the folder-per-user layout."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    rng = rng or random.SystemRandom()
    suffix = "".join(
        rng.choice(string.ascii_lowercase + string.digits) for _ in range(11)
    )
    return f"{owner}/{now_ms}_{suffix}.{file_extension(filename)}"
