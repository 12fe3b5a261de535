"""Load Selection — pure rules for shaping a shipment before any IO.

Invariants:
    - LoadSelector identifiers are stripped, de-duplicated, order-preserving strings
      (numeric EIDs from spreadsheets are string-coerced)
    - An empty selector is valid: it produces a load with zero calves
    - A load needs a destination ranch id or a free-text destination name
    - derive_load_status is PURE and never stored

Design Decisions:
    - Silent exclusion lives in the engine, not here: the selector only says
      what was asked for, the engine decides what was shippable
"""

import re
from dataclasses import dataclass, field
from typing import Iterable

from calftrack.core.domain_types import LoadStatus
from calftrack.core.errors import FieldValidationError


_CANCELED = re.compile(r"cancel", re.IGNORECASE)


def normalize_identifier_list(values: Iterable[object] | None) -> tuple[str, ...]:
    if not values:
        return ()
    seen: dict[str, None] = {}
    for value in values:
        if value is None:
            continue
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return tuple(seen)


@dataclass(frozen=True)
class LoadSelector:
    """Which calves the caller wants on the load, by EID, primary tag and/or calf id."""
    eids: tuple[str, ...] = field(default_factory=tuple)
    primary_ids: tuple[str, ...] = field(default_factory=tuple)
    calf_ids: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        eids: Iterable[object] | None = None,
        primary_ids: Iterable[object] | None = None,
        calf_ids: Iterable[object] | None = None,
    ) -> "LoadSelector":
        return cls(
            eids=normalize_identifier_list(eids),
            primary_ids=normalize_identifier_list(primary_ids),
            calf_ids=tuple(
                int(value) for value in normalize_identifier_list(calf_ids)
                if value.isdigit()
            ),
        )

    @property
    def is_empty(self) -> bool:
        return not self.eids and not self.primary_ids and not self.calf_ids


def resolve_destination(
    destination_ranch_id: int | None, destination_name: str | None,
) -> tuple[int | None, str | None]:
    """Validate the destination pair. Returns (ranch_id, trimmed free-text name)."""
    name = (destination_name or "").strip() or None
    if destination_ranch_id is None and name is None:
        raise FieldValidationError(
            "Destination ranch or custom destination is required",
            "destination_ranch_id", None,
        )
    return destination_ranch_id, name


def derive_load_status(
    notes: str | None, head_count: int, arrival_date: object,
) -> LoadStatus:
    if notes and _CANCELED.search(notes):
        return LoadStatus.CANCELED
    if head_count <= 0:
        return LoadStatus.DRAFT
    if arrival_date:
        return LoadStatus.ARRIVED
    return LoadStatus.IN_TRANSIT


def can_edit_arrival_status(
    acting_ranch_id: int, origin_ranch_id: int | None,
    destination_ranch_id: int | None,
) -> bool:
    """Origin or destination ranch may edit; origin only for free-text destinations."""
    if destination_ranch_id is not None:
        return acting_ranch_id in (origin_ranch_id, destination_ranch_id)
    return acting_ranch_id == origin_ranch_id
