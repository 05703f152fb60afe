"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for the hosted PostgreSQL (native async, no thread pool)
"""
