"""Infrastructure Layer — database engine, sessions and cross-cutting concerns.

Invariants:
    - Infrastructure imports only core/errors.py from the domain layer
    - Every driver exception is mapped to a CalftrackError before it escapes

Design Decisions:
    - Thin wrappers over SQLAlchemy and logging (single responsibility per module)
"""
