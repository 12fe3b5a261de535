"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate shape at the system boundary; domain normalisation
      (canonical names, date serials, status aliases) stays in services
    - Patch schemas are dumped with exclude_unset so absent means "unchanged"

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
