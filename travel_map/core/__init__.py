"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are deterministic given their inputs (clock and randomness injectable)

Design Decisions:
    - Functional core separated from the imperative shell (services + api)
"""
