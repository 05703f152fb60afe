"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - VisitedPlace is the aggregate root for likes, comments and notifications

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from travel_map.models.visited_place import VisitedPlace  # noqa: F401
from travel_map.models.comment import Comment  # noqa: F401
from travel_map.models.like import Like  # noqa: F401
from travel_map.models.notification import Notification  # noqa: F401
from travel_map.models.user_profile import UserProfile  # noqa: F401
