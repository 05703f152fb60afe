"""User Info — pure derivation of the public author card shown next to posts and comments.

Invariants:
    - Profile display_name / avatar_url always win when present
    - The viewer's own card falls back to session name, then anonymous label
    - Other users fall back to the local part of their id (ids are emails for OAuth users)
    - Never returns an empty name

Design Decisions:
    - Protocol over ORM import: core stays free of persistence types
"""

from typing import Protocol

from travel_map.core.domain_types import SessionUser

ANONYMOUS_NAME = "匿名用戶"
GENERIC_NAME = "用戶"


class ProfileLike(Protocol):
    display_name: str | None
    avatar_url: str | None


def fallback_name(user_id: str) -> str:
    """Local part of an email-style id, or the generic label."""
    return user_id.split("@")[0] or GENERIC_NAME


def build_user_info(
    user_id: str, profile: ProfileLike | None, viewer: SessionUser | None,
) -> dict:
    """Author card for user_id as seen by viewer."""
    display_name = profile.display_name if profile else None
    avatar_url = profile.avatar_url if profile else None

    if viewer is not None and viewer.owns(user_id):
        return {
            "id": user_id,
            "name": display_name or viewer.name or ANONYMOUS_NAME,
            "email": viewer.email or "",
            "image": avatar_url or viewer.image,
        }
    return {
        "id": user_id,
        "name": display_name or fallback_name(user_id),
        "email": user_id,
        "image": avatar_url,
    }


def resolve_actor_name(user_id: str, profile: ProfileLike | None) -> str:
    """Name stored on notifications at creation time."""
    if profile and profile.display_name:
        return profile.display_name
    return fallback_name(user_id)
