"""Infrastructure — adapters for the database, object storage, session tokens and logging.

Invariants:
    - Only this package talks to external systems
    - External failures are mapped to core/errors.py types here

Design Decisions:
    - Module-level singletons initialized in the FastAPI lifespan
"""
