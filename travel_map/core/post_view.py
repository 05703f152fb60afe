"""Post View — pure shaping of stored travel records into API dicts.

Invariants:
    - image_url is always the first entry of image_urls (or None when empty)
    - Search results carry derived title / instagram_url / visited_at fields
    - Pure: accepts any object with the VisitedPlace attributes
"""

from typing import Any

TITLE_LENGTH = 50


def normalize_images(
    image_url: str | None, image_urls: list[str] | None,
) -> tuple[str | None, list[str]]:
    """Reconcile the single-image column with the image list.

    A supplied list wins and its first entry becomes the cover image;
    otherwise a lone image_url becomes a one-element list.
    """
    if image_urls is not None:
        urls = [u for u in image_urls if u]
        return (urls[0] if urls else None), urls
    if image_url:
        return image_url, [image_url]
    return None, []


def derive_title(note: str | None, county: str) -> str:
    if not note:
        return county
    if len(note) > TITLE_LENGTH:
        return note[:TITLE_LENGTH] + "..."
    return note


def iso_or_none(value) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_post(post: Any) -> dict:
    return {
        "id": str(post.id),
        "user_id": post.user_id,
        "county": post.county,
        "note": post.note,
        "ig_url": post.ig_url,
        "image_url": post.image_url,
        "image_urls": list(post.image_urls or []),
        "is_public": post.is_public,
        "created_at": iso_or_none(post.created_at),
        "updated_at": iso_or_none(post.updated_at),
    }


def serialize_comment(comment: Any) -> dict:
    return {
        "id": str(comment.id),
        "post_id": str(comment.post_id),
        "user_id": comment.user_id,
        "content": comment.content,
        "created_at": iso_or_none(comment.created_at),
        "updated_at": iso_or_none(comment.updated_at),
    }


def serialize_like(like: Any) -> dict:
    return {
        "id": str(like.id),
        "user_id": like.user_id,
        "post_id": str(like.post_id) if like.post_id else None,
        "comment_id": str(like.comment_id) if like.comment_id else None,
        "created_at": iso_or_none(like.created_at),
    }


def with_search_fields(post_data: dict) -> dict:
    """Add the fields search result cards render."""
    return {
        **post_data,
        "title": derive_title(post_data.get("note"), post_data["county"]),
        "location": None,
        "instagram_url": post_data.get("ig_url"),
        "visited_at": post_data.get("created_at"),
    }
