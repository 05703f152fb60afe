"""Notification Policy — who gets notified, and when a notification is a repeat.

Invariants:
    - Actors are never notified about their own actions
    - An identical notification (recipient, actor, type, post, comment) within
      DUPLICATE_WINDOW is suppressed, so like/unlike/like does not spam
    - Pure: the shell supplies the clock and the recent-match lookup result
"""

from datetime import datetime, timedelta, timezone

from travel_map.core.domain_types import LikeTarget, NotificationType

DUPLICATE_WINDOW = timedelta(hours=1)


def is_self_action(recipient_id: str, actor_id: str) -> bool:
    return recipient_id == actor_id


def duplicate_cutoff(now: datetime | None = None) -> datetime:
    """Oldest created_at that still counts as a duplicate."""
    return (now or datetime.now(timezone.utc)) - DUPLICATE_WINDOW


def notification_type_for_like(target: LikeTarget) -> NotificationType:
    if target is LikeTarget.COMMENT:
        return NotificationType.LIKE_COMMENT
    return NotificationType.LIKE_POST
