"""Service test fixtures — async DB, fake storage and a FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - get_storage overridden with a real StorageClient on an httpx.MockTransport
    - auth_headers() mints session tokens the same way the identity provider does

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features are not exercised here)
    - MockTransport over a fake client class: the storage wrapper's request
      building and error mapping run for real
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from travel_map.config import get_settings
from travel_map.core.domain_types import SessionUser
from travel_map.db.base import Base
from travel_map.infrastructure.database import get_db, DatabaseSessionManager
from travel_map.infrastructure.session_tokens import issue_session_token
from travel_map.infrastructure.storage_client import StorageClient, get_storage
import travel_map.infrastructure.database as db_module
from travel_map.models import (
    Comment, Like, Notification, UserProfile, VisitedPlace,
)
from travel_map.main import app

ALICE = SessionUser(
    id="alice@example.com", email="alice@example.com", name="Alice",
    image="https://img.example.com/alice.png",
)
BOB = SessionUser(id="bob@example.com", email="bob@example.com", name="Bob")


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def storage_backend():
    """Records storage requests and serves canned bucket responses.

    Returns dict with:
      - requests: list of (method, path, body bytes)
      - buckets: bucket list returned by GET /bucket
      - fail_paths: object path substrings that answer 400
    """
    state = {"requests": [], "buckets": [], "fail_paths": []}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        state["requests"].append((request.method, path, request.content))
        if request.method == "GET" and path.endswith("/bucket"):
            return httpx.Response(200, json=state["buckets"])
        if request.method == "POST" and path.endswith("/bucket"):
            body = json.loads(request.content)
            state["buckets"].append({"id": body["id"], "name": body["name"]})
            return httpx.Response(200, json={"name": body["name"]})
        if any(p in path for p in state["fail_paths"]):
            return httpx.Response(400, json={"message": "The resource already exists"})
        key = path.split("/storage/v1/object/", 1)[1]
        return httpx.Response(200, json={"Key": key})

    state["transport"] = httpx.MockTransport(handler)
    return state


@pytest.fixture
async def storage(storage_backend):
    client = StorageClient(
        "http://storage.test", "test-service-key",
        transport=storage_backend["transport"],
    )
    yield client
    await client.aclose()


@pytest.fixture
async def client(test_engine, test_session_factory, storage):
    """FastAPI test client with DB and storage dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


def auth_headers(user: SessionUser = ALICE) -> dict[str, str]:
    settings = get_settings()
    token = issue_session_token(user, settings.auth_secret, settings.auth_algorithm)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice() -> dict[str, str]:
    return auth_headers(ALICE)


@pytest.fixture
def bob() -> dict[str, str]:
    return auth_headers(BOB)


@pytest.fixture
def make_headers():
    """Build auth headers for an arbitrary SessionUser."""
    return auth_headers


class Seeder:
    """Writes rows straight into the test DB, with explicit timestamps."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    async def post(
        self, user_id: str = "alice@example.com", county: str = "臺北",
        note: str | None = "Night market", is_public: bool = True,
        **fields,
    ) -> VisitedPlace:
        post = VisitedPlace(
            user_id=user_id, county=county, note=note, is_public=is_public,
            image_urls=fields.pop("image_urls", []), created_at=self._tick(),
            **fields,
        )
        return await self._save(post)

    async def comment(
        self, post: VisitedPlace, user_id: str, content: str = "Looks great",
    ) -> Comment:
        return await self._save(Comment(
            post_id=post.id, user_id=user_id, content=content,
            created_at=self._tick(),
        ))

    async def like(
        self, user_id: str, post: VisitedPlace | None = None,
        comment: Comment | None = None,
    ) -> Like:
        return await self._save(Like(
            user_id=user_id,
            post_id=post.id if post else None,
            comment_id=comment.id if comment else None,
        ))

    async def profile(self, user_id: str, **fields) -> UserProfile:
        return await self._save(UserProfile(user_id=user_id, **fields))

    async def notification(self, user_id: str, actor_id: str, **fields) -> Notification:
        fields.setdefault("type", "like_post")
        fields.setdefault("created_at", self._tick())
        return await self._save(Notification(
            user_id=user_id, actor_id=actor_id, **fields,
        ))

    async def _save(self, row):
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row


@pytest.fixture
def seed(test_db) -> Seeder:
    return Seeder(test_db)
