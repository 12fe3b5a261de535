"""Movement Events — the append-only history log as a tagged union.

Invariants:
    - Events are frozen dataclasses: once built they never change
    - Each variant declares only the fields meaningful for its MovementType
      (e.g. LoadTransfer always has load_id; Death never does)
    - to_row() / event_from_row() are exact inverses over the stored columns
    - Rows are self-contained snapshots: rebuilding an event never consults
      the mutable calf ledger

Design Decisions:
    - Union type over one record with many Optionals: "which fields matter for
      which kind" is checkable by the type checker and by match statements
    - Dispatch via explicit dict (no getattr magic)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from calftrack.core.domain_types import CalfStatus, MovementType


@dataclass(frozen=True)
class Intake:
    """Calf entered the system at a ranch."""
    calf_id: int
    event_date: datetime
    to_ranch_id: int | None
    to_status: CalfStatus
    notes: str | None = "Calf added into system"
    id: int | None = None
    kind: MovementType = field(default=MovementType.INTAKE, init=False)


@dataclass(frozen=True)
class LoadTransfer:
    """Calf left on a load (feeding → shipped)."""
    calf_id: int
    load_id: int | None
    event_date: datetime
    from_ranch_id: int | None
    to_ranch_id: int | None
    from_status: CalfStatus = CalfStatus.FEEDING
    to_status: CalfStatus = CalfStatus.SHIPPED
    notes: str | None = None
    id: int | None = None
    kind: MovementType = field(default=MovementType.LOAD_TRANSFER, init=False)


@dataclass(frozen=True)
class RanchTransfer:
    """Current ranch edited directly (no load involved)."""
    calf_id: int
    event_date: datetime
    from_ranch_id: int | None
    to_ranch_id: int | None
    from_status: CalfStatus | None = None
    to_status: CalfStatus | None = None
    notes: str | None = "Current ranch updated"
    id: int | None = None
    kind: MovementType = field(default=MovementType.RANCH_TRANSFER, init=False)


@dataclass(frozen=True)
class StatusChange:
    """Status edited, or restored after a load was deleted."""
    calf_id: int
    event_date: datetime
    from_status: CalfStatus | None
    to_status: CalfStatus
    from_ranch_id: int | None = None
    to_ranch_id: int | None = None
    load_id: int | None = None
    notes: str | None = None
    id: int | None = None
    kind: MovementType = field(default=MovementType.STATUS_CHANGE, init=False)


@dataclass(frozen=True)
class Death:
    calf_id: int
    event_date: datetime
    from_status: CalfStatus | None
    ranch_id: int | None
    notes: str | None = None
    id: int | None = None
    kind: MovementType = field(default=MovementType.DEATH, init=False)


@dataclass(frozen=True)
class ShippedOut:
    """Status set to shipped outside of a load."""
    calf_id: int
    event_date: datetime
    from_status: CalfStatus | None
    ranch_id: int | None
    notes: str | None = None
    id: int | None = None
    kind: MovementType = field(default=MovementType.SHIPPED_OUT, init=False)


MovementEvent = Union[Intake, LoadTransfer, RanchTransfer, StatusChange, Death, ShippedOut]


def _status(value: str | None) -> CalfStatus | None:
    return CalfStatus(value) if value else None


def to_row(event: MovementEvent) -> dict[str, Any]:
    """Column values for a calf_movement_history insert."""
    row: dict[str, Any] = {
        "calf_id": event.calf_id,
        "movement_type": event.kind.value,
        "event_date": event.event_date,
        "notes": event.notes,
        "load_id": None,
        "from_ranch_id": None,
        "to_ranch_id": None,
        "from_status": None,
        "to_status": None,
    }
    if isinstance(event, (Death, ShippedOut)):
        row["from_ranch_id"] = event.ranch_id
        row["to_ranch_id"] = event.ranch_id
        row["from_status"] = event.from_status.value if event.from_status else None
        row["to_status"] = (
            CalfStatus.DECEASED if isinstance(event, Death) else CalfStatus.SHIPPED
        ).value
        return row
    if isinstance(event, (LoadTransfer, StatusChange)):
        row["load_id"] = event.load_id
    if not isinstance(event, Intake):
        row["from_ranch_id"] = event.from_ranch_id
        row["from_status"] = event.from_status.value if event.from_status else None
    row["to_ranch_id"] = event.to_ranch_id
    row["to_status"] = event.to_status.value if event.to_status else None
    return row


def _intake(row) -> Intake:
    return Intake(
        id=row.id, calf_id=row.calf_id, event_date=row.event_date,
        to_ranch_id=row.to_ranch_id,
        to_status=_status(row.to_status) or CalfStatus.FEEDING,
        notes=row.notes,
    )


def _load_transfer(row) -> LoadTransfer:
    return LoadTransfer(
        id=row.id, calf_id=row.calf_id, load_id=row.load_id,
        event_date=row.event_date,
        from_ranch_id=row.from_ranch_id, to_ranch_id=row.to_ranch_id,
        from_status=_status(row.from_status) or CalfStatus.FEEDING,
        to_status=_status(row.to_status) or CalfStatus.SHIPPED,
        notes=row.notes,
    )


def _ranch_transfer(row) -> RanchTransfer:
    return RanchTransfer(
        id=row.id, calf_id=row.calf_id, event_date=row.event_date,
        from_ranch_id=row.from_ranch_id, to_ranch_id=row.to_ranch_id,
        from_status=_status(row.from_status), to_status=_status(row.to_status),
        notes=row.notes,
    )


def _status_change(row) -> StatusChange:
    return StatusChange(
        id=row.id, calf_id=row.calf_id, event_date=row.event_date,
        from_status=_status(row.from_status),
        to_status=_status(row.to_status) or CalfStatus.FEEDING,
        from_ranch_id=row.from_ranch_id, to_ranch_id=row.to_ranch_id,
        load_id=row.load_id, notes=row.notes,
    )


def _death(row) -> Death:
    return Death(
        id=row.id, calf_id=row.calf_id, event_date=row.event_date,
        from_status=_status(row.from_status),
        ranch_id=row.to_ranch_id or row.from_ranch_id, notes=row.notes,
    )


def _shipped_out(row) -> ShippedOut:
    return ShippedOut(
        id=row.id, calf_id=row.calf_id, event_date=row.event_date,
        from_status=_status(row.from_status),
        ranch_id=row.to_ranch_id or row.from_ranch_id, notes=row.notes,
    )


_FROM_ROW = {
    MovementType.INTAKE: _intake,
    MovementType.LOAD_TRANSFER: _load_transfer,
    MovementType.RANCH_TRANSFER: _ranch_transfer,
    MovementType.STATUS_CHANGE: _status_change,
    MovementType.DEATH: _death,
    MovementType.SHIPPED_OUT: _shipped_out,
}


def event_from_row(row) -> MovementEvent:
    """Rebuild the typed event from a stored history row (ORM object or Row)."""
    return _FROM_ROW[MovementType(row.movement_type)](row)


def event_to_dict(event: MovementEvent) -> dict[str, Any]:
    """API shape — the stored columns plus id, with enum values unwrapped."""
    row = to_row(event)
    row["id"] = event.id
    row["event_date"] = event.event_date.isoformat() if event.event_date else None
    return row
