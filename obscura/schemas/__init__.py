"""Pydantic Schemas — request/response envelopes for API endpoints.

Invariants:
    - Schemas decode shape at the system boundary; business rules live in core/

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
