"""Services Layer — database-backed operations behind the routes.

Invariants:
    - Each service takes an AsyncSession (and the caller where it matters)
    - Services raise core/errors.py types; routes never build error responses

Design Decisions:
    - One service per resource; shared reads live in post_queries,
      post_enrichment and user_directory
"""
