"""Profile Stats — pure computation of the counters shown on a profile page.

Invariants:
    - totalCounties counts reconciled counties: 臺北 and Taipei City are one county
    - Counts only the posts passed in (caller applies visibility first)
    - Never raises — unknown county spellings count as their own county
"""

from collections.abc import Iterable

from travel_map.core.counties import to_short_name


def count_distinct_counties(counties: Iterable[str]) -> int:
    return len({to_short_name(c) or c for c in counties})


def compute_profile_stats(
    counties: list[str], total_likes: int, total_comments: int,
) -> dict:
    return {
        "totalPosts": len(counties),
        "totalCounties": count_distinct_counties(counties),
        "totalLikes": total_likes,
        "totalComments": total_comments,
    }
