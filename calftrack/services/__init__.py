"""Services Layer — registries, calf ledger, transfer engine and reporting.

Invariants:
    - Every write goes through unit_of_work (commit or rollback, errors mapped)
    - Reporting never mutates

Design Decisions:
    - One service per aggregate; services receive the request's AsyncSession
"""
