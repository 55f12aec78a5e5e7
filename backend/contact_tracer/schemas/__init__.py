"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Core records never leak: routes convert through from_record helpers

Design Decisions:
    - Separate from core records: schemas are API contracts, records are the domain (ADR: DDD boundary)
"""
