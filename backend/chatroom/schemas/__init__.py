"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - JSON uses camelCase names (dateJoined, msgFrom, msgDateTime, _id);
      Python code uses snake_case attributes

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
