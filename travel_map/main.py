"""Travel Map API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TravelMapError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and storage clients initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: cleaner cleanup of the pool and HTTP client
    - Table creation only when database_auto_create is set (local development)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travel_map.api.error_handlers import register_error_handlers
from travel_map.api.routes import (
    comments, health, likes, notifications, posts, profile, search,
    storage, visited,
)
from travel_map.config import get_settings
from travel_map.infrastructure.database import init_db
from travel_map.infrastructure.observability import setup_logging
from travel_map.infrastructure.storage_client import init_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_auto_create:
        await manager.create_all()
    storage_client = init_storage(
        settings.storage_url,
        settings.storage_service_key,
        timeout_seconds=settings.storage_timeout_seconds,
    )
    logger.info("Travel Map API started")
    yield
    logger.info("Travel Map API shutting down")
    await storage_client.aclose()
    await manager.dispose()


app = FastAPI(
    title="Travel Map API", version="1.0.0", lifespan=lifespan,
)

# CORS configured from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(visited.router)
app.include_router(posts.router)
app.include_router(search.router)
app.include_router(likes.router)
app.include_router(comments.router)
app.include_router(notifications.router)
app.include_router(storage.router)
app.include_router(profile.router)

register_error_handlers(app)
