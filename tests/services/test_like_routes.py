"""Like Routes — liking, duplicate detection, unliking and notifications.

Invariants:
    - Liking a post twice returns 409 on the second attempt
    - Likes on missing targets are 404
    - Liking someone else's content notifies them; liking your own does not
"""

from uuid import uuid4

from sqlalchemy import func, select

from travel_map.models import Like, Notification
from travel_map.services.like_service import LikeService


async def test_like_post(client, seed, bob):
    post = await seed.post()
    res = await client.post(
        "/api/v1/social/likes", json={"post_id": str(post.id)}, headers=bob,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["post_id"] == str(post.id)
    assert data["comment_id"] is None
    assert data["user_id"] == "bob@example.com"


async def test_liking_twice_is_409(client, seed, bob):
    post = await seed.post()
    body = {"post_id": str(post.id)}
    first = await client.post("/api/v1/social/likes", json=body, headers=bob)
    second = await client.post("/api/v1/social/likes", json=body, headers=bob)
    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "ALREADY_LIKED"


async def test_concurrent_duplicate_like_is_409(client, seed, test_db, bob, monkeypatch):
    post = await seed.post()
    await seed.like("bob@example.com", post=post)

    # Another request inserted the like after this one checked for it.
    async def not_found(self, body):
        return None

    monkeypatch.setattr(LikeService, "_existing", not_found)
    res = await client.post(
        "/api/v1/social/likes", json={"post_id": str(post.id)}, headers=bob,
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_LIKED"

    likes = await test_db.execute(select(func.count(Like.id)))
    assert likes.scalar_one() == 1
    notes = await test_db.execute(select(func.count(Notification.id)))
    assert notes.scalar_one() == 0


async def test_like_requires_exactly_one_target(client, bob):
    res = await client.post("/api/v1/social/likes", json={}, headers=bob)
    assert res.status_code == 400
    res = await client.post(
        "/api/v1/social/likes",
        json={"post_id": str(uuid4()), "comment_id": str(uuid4())},
        headers=bob,
    )
    assert res.status_code == 400


async def test_like_missing_post_is_404(client, bob):
    res = await client.post(
        "/api/v1/social/likes", json={"post_id": str(uuid4())}, headers=bob,
    )
    assert res.status_code == 404


async def test_like_notifies_post_author(client, seed, test_db, bob):
    post = await seed.post()
    await seed.profile("bob@example.com", display_name="Bobby")
    await client.post(
        "/api/v1/social/likes", json={"post_id": str(post.id)}, headers=bob,
    )
    result = await test_db.execute(select(Notification))
    notification = result.scalar_one()
    assert notification.user_id == "alice@example.com"
    assert notification.actor_id == "bob@example.com"
    assert notification.actor_name == "Bobby"
    assert notification.type == "like_post"
    assert notification.post_id == post.id


async def test_like_own_post_does_not_notify(client, seed, test_db, alice):
    post = await seed.post()
    res = await client.post(
        "/api/v1/social/likes", json={"post_id": str(post.id)}, headers=alice,
    )
    assert res.status_code == 200
    count = await test_db.execute(select(func.count(Notification.id)))
    assert count.scalar_one() == 0


async def test_like_unlike_like_notifies_once(client, seed, test_db, bob):
    post = await seed.post()
    body = {"post_id": str(post.id)}
    await client.post("/api/v1/social/likes", json=body, headers=bob)
    await client.delete(
        "/api/v1/social/likes", params={"post_id": str(post.id)}, headers=bob,
    )
    res = await client.post("/api/v1/social/likes", json=body, headers=bob)
    assert res.status_code == 200
    count = await test_db.execute(select(func.count(Notification.id)))
    assert count.scalar_one() == 1


async def test_like_comment_notifies_comment_author(client, seed, test_db, alice):
    post = await seed.post()
    comment = await seed.comment(post, "bob@example.com")
    res = await client.post(
        "/api/v1/social/likes", json={"comment_id": str(comment.id)}, headers=alice,
    )
    assert res.status_code == 200
    assert res.json()["data"]["post_id"] is None

    result = await test_db.execute(select(Notification))
    notification = result.scalar_one()
    assert notification.user_id == "bob@example.com"
    assert notification.type == "like_comment"
    assert notification.comment_id == comment.id
    assert notification.post_id == post.id


async def test_comment_like_does_not_count_as_post_like(client, seed, alice):
    post = await seed.post()
    comment = await seed.comment(post, "bob@example.com")
    await client.post(
        "/api/v1/social/likes", json={"comment_id": str(comment.id)}, headers=alice,
    )
    res = await client.get(
        "/api/v1/social/likes", params={"post_id": str(post.id)}, headers=alice,
    )
    assert res.json()["count"] == 0


async def test_list_post_likes(client, seed, alice):
    post = await seed.post()
    await seed.like("bob@example.com", post=post)
    await seed.like("carol@example.com", post=post)
    res = await client.get(
        "/api/v1/social/likes", params={"post_id": str(post.id)}, headers=alice,
    )
    assert {like["user_id"] for like in res.json()["data"]} == {
        "bob@example.com", "carol@example.com",
    }


async def test_unlike_is_idempotent(client, seed, test_db, bob):
    post = await seed.post()
    await seed.like("bob@example.com", post=post)
    for _ in range(2):
        res = await client.delete(
            "/api/v1/social/likes", params={"post_id": str(post.id)}, headers=bob,
        )
        assert res.status_code == 200
    count = await test_db.execute(select(func.count(Like.id)))
    assert count.scalar_one() == 0


async def test_unlike_needs_a_target(client, bob):
    res = await client.delete("/api/v1/social/likes", headers=bob)
    assert res.status_code == 400
