"""Post View — verifies image reconciliation, titles and serializers."""

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

from travel_map.core.post_view import (
    derive_title, normalize_images, serialize_like, serialize_post,
    with_search_fields,
)


def test_single_image_becomes_list():
    assert normalize_images("a.jpg", None) == ("a.jpg", ["a.jpg"])


def test_list_wins_and_first_is_cover():
    assert normalize_images("old.jpg", ["b.jpg", "c.jpg"]) == (
        "b.jpg", ["b.jpg", "c.jpg"],
    )


def test_empty_list_clears_cover():
    assert normalize_images("old.jpg", []) == (None, [])


def test_blank_entries_dropped():
    assert normalize_images(None, ["", "d.jpg"]) == ("d.jpg", ["d.jpg"])


def test_no_images():
    assert normalize_images(None, None) == (None, [])


def test_title_truncates_long_notes():
    note = "x" * 60
    assert derive_title(note, "臺北") == "x" * 50 + "..."


def test_title_keeps_short_notes_and_falls_back_to_county():
    assert derive_title("Night market", "臺北") == "Night market"
    assert derive_title(None, "臺北") == "臺北"
    assert derive_title("", "臺北") == "臺北"


def _post(**overrides):
    values = dict(
        id=uuid4(), user_id="amy@example.com", county="臺北", note="Shilin",
        ig_url=None, image_url="a.jpg", image_urls=["a.jpg"], is_public=True,
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc), updated_at=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_serialize_post():
    post = _post()
    data = serialize_post(post)
    assert data["id"] == str(post.id)
    assert data["created_at"] == "2024-05-01T00:00:00+00:00"
    assert data["updated_at"] is None
    assert data["image_urls"] == ["a.jpg"]


def test_serialize_post_handles_null_image_list():
    assert serialize_post(_post(image_urls=None))["image_urls"] == []


def test_serialize_comment_like():
    comment_id = uuid4()
    like = SimpleNamespace(
        id=uuid4(), user_id="kai@example.com", post_id=None,
        comment_id=comment_id, created_at=None,
    )
    data = serialize_like(like)
    assert data["post_id"] is None
    assert data["comment_id"] == str(comment_id)


def test_search_fields():
    data = with_search_fields(serialize_post(_post(ig_url="https://ig/p/1")))
    assert data["title"] == "Shilin"
    assert data["instagram_url"] == "https://ig/p/1"
    assert data["visited_at"] == data["created_at"]
    assert data["location"] is None
