"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input)
    - County names are reconciled to their short form here, once

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Wire names follow the web client (camelCase where it sends camelCase)
"""
