"""Boundary Protocols — contracts between the ledger and its collaborators.

Invariants:
    - Ledger code depends on these Protocols, never on a concrete registry
    - Implementations provided by the service layer via constructor injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO inside the caller's unit of work
"""

from typing import Protocol

from calftrack.core.domain_types import RegistryKind


class CanonicalNameResolver(Protocol):
    """Lookup-or-create oracle for breed/seller free text."""
    async def ensure_canonical_name(
        self, kind: RegistryKind, raw_text: str,
    ) -> str | None: ...
