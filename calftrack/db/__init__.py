"""Database Metadata — declarative Base shared by every ORM model.

Invariants:
    - Constraint names come from one naming convention (db/base.py)

Design Decisions:
    - Engines and sessions live in infrastructure/database.py; this package
      only owns table metadata
"""
