"""Database Session Manager — pooled async sessions for posts, comments, likes and profiles.

Invariants:
    - Every session rolls back on exception, so a failed like or comment
      never leaves a half-written notification behind
    - Connection pool uses pool_pre_ping for stale connection detection
    - SQLAlchemy failures leave the session as DatabaseError (core/errors.py),
      with the driver text kept in logs and out of responses

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - create_all() exists for local development only (database_auto_create);
      the hosted database owns the production schema
    - Services that expect a constraint hit (duplicate likes) catch
      IntegrityError themselves before it reaches the session boundary
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from travel_map.core.errors import DatabaseError
from travel_map.db.base import Base

logger = logging.getLogger(__name__)

# Checked in order: IntegrityError and OperationalError subclass DBAPIError.
_DB_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (
        IntegrityError, "write",
        "row conflicts with a uniqueness, foreign key or single-target rule",
    ),
    (OperationalError, "connection", "travel map database is unreachable"),
    (DBAPIError, "query", "driver rejected the statement"),
)


def map_db_error(exc: SQLAlchemyError) -> DatabaseError:
    """Translate a SQLAlchemy failure into the API's DatabaseError."""
    for exc_type, operation, message in _DB_ERROR_MAP:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    return DatabaseError("unexpected ORM failure", "session")


class DatabaseSessionManager:
    """Owns the engine and hands out request-scoped sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One request's unit of work; rolled back and closed on any failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = map_db_error(e)
            logger.error(
                f"DB {error.operation} error: {e}",
                extra={"db_error": type(e).__name__, "operation": error.operation},
            )
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_all(self) -> None:
        """Create missing tables from model metadata."""
        import travel_map.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def health_check(self) -> bool:
        """SELECT 1 round trip for /health/ready."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(
                f"Readiness check could not reach the database: {e}",
                extra={"db_error": type(e).__name__},
            )
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
