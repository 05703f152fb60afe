"""Domain Types — identity, enums and value types shared across the codebase.

Invariants:
    - User ids are opaque strings (OAuth users are keyed by email)
    - All valid notification kinds encoded as an Enum — no raw string matching
    - SessionUser is immutable once decoded from a session token
    - A caller owns rows keyed by either their session id or their email

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - SessionUser as frozen dataclass: the shell builds it, the core only reads it
"""

from dataclasses import dataclass
from enum import Enum


class NotificationType(str, Enum):
    """What the actor did to the recipient's content."""
    LIKE_POST = "like_post"
    LIKE_COMMENT = "like_comment"
    COMMENT_POST = "comment_post"


class LikeTarget(str, Enum):
    """A like points at exactly one of these."""
    POST = "post"
    COMMENT = "comment"


@dataclass(frozen=True)
class SessionUser:
    """The signed-in caller, as asserted by the identity provider."""
    id: str
    email: str | None = None
    name: str | None = None
    image: str | None = None

    @property
    def owner_ids(self) -> set[str]:
        """Keys the caller's rows may be stored under (legacy rows use email)."""
        return {uid for uid in (self.id, self.email) if uid}

    def owns(self, user_id: str) -> bool:
        return user_id in self.owner_ids
