"""Root conftest — shared test configuration."""

import os

# Ensure tests never sign tokens with a real secret or reach a real database
os.environ.setdefault("AUTH_SECRET", "test-session-secret-0123456789abcdef")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("STORAGE_URL", "http://storage.test")
os.environ.setdefault("STORAGE_SERVICE_KEY", "test-service-key")
