"""Database Errors — ORM failures become DatabaseError and a clean 500.

Invariants:
    - A constraint hit inside a session surfaces as a "write" DatabaseError
    - Non-database exceptions pass through the session untouched
    - Driver text never reaches the response body
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from travel_map.core.errors import DatabaseError
from travel_map.infrastructure.database import DatabaseSessionManager, map_db_error
from travel_map.models import Comment, Like
from travel_map.services.notification_service import NotificationService


@pytest.fixture
def manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


async def test_duplicate_like_is_write_error(manager, seed, test_db):
    post = await seed.post()
    await seed.like("bob@example.com", post=post)

    with pytest.raises(DatabaseError) as exc_info:
        async with manager.session() as db:
            db.add(Comment(post_id=post.id, user_id="bob@example.com", content="hi"))
            db.add(Like(user_id="bob@example.com", post_id=post.id))
            await db.flush()

    assert exc_info.value.operation == "write"
    assert exc_info.value.http_status == 500
    assert isinstance(exc_info.value.__cause__, IntegrityError)
    # The comment flushed alongside the like was rolled back.
    comments = await test_db.execute(select(func.count(Comment.id)))
    assert comments.scalar_one() == 0


async def test_non_database_errors_pass_through(manager):
    with pytest.raises(ValueError):
        async with manager.session():
            raise ValueError("not a county")


def test_operational_error_maps_to_connection():
    exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
    error = map_db_error(exc)
    assert error.operation == "connection"
    assert error.code == "DATABASE_ERROR"


def test_unknown_orm_failure_maps_to_session():
    assert map_db_error(SQLAlchemyError("boom")).operation == "session"


async def test_database_outage_is_500_without_driver_text(client, alice, monkeypatch):
    async def unreachable(self, *args, **kwargs):
        raise map_db_error(
            OperationalError("SELECT", {}, Exception("password authentication failed")),
        )

    monkeypatch.setattr(NotificationService, "inbox", unreachable)
    res = await client.get("/api/v1/social/notifications", headers=alice)
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "DATABASE_ERROR"
    assert "password" not in error["message"]


async def test_validation_error_names_the_field(client, alice):
    res = await client.post(
        "/api/v1/content/visited", json={"county": "Atlantis"}, headers=alice,
    )
    details = res.json()["error"]["details"]
    assert [d["field"] for d in details] == ["county"]
