"""Core Layer: pure domain logic, no IO, no async, no logging.

Invariants:
    - No module in core/ imports from services/, api/, schemas/ or infrastructure/
    - Queries are pure and deterministic; mutations are atomic per operation

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
