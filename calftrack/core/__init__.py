"""Core Layer — pure domain logic, no DB, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (today's date aside)

Design Decisions:
    - Functional core separated from the imperative shell in services/
"""
