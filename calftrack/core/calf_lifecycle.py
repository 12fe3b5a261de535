"""Calf Lifecycle — status vocabulary, transition table and change classification.

Invariants:
    - parse_* functions are PURE: they normalise aliases or raise FieldValidationError
    - LIFECYCLE_TRANSITIONS documents the intended lifecycle; it is advisory
      (direct patches may set any status), only load transfers are enforced
    - Every status change maps to exactly one MovementType

Design Decisions:
    - Advisory table over enforcement: stored calves already carry every status
      combination, and patching is the correction path for bad data; off-lifecycle
      moves are surfaced as warnings by the ledger instead of rejected
"""

import re
from enum import Enum

from calftrack.core.domain_types import (
    ArrivalStatus, CalfStatus, CalfType, MovementType, SellStatus, Sex,
)
from calftrack.core.errors import FieldValidationError


LIFECYCLE_TRANSITIONS: dict[CalfStatus, frozenset[CalfStatus]] = {
    CalfStatus.FEEDING: frozenset({
        CalfStatus.SHIPPED, CalfStatus.DECEASED, CalfStatus.SOLD,
    }),
    CalfStatus.SHIPPED: frozenset({
        CalfStatus.ALIVE, CalfStatus.SOLD, CalfStatus.DECEASED,
        CalfStatus.FEEDING,
    }),
    CalfStatus.ALIVE: frozenset({
        CalfStatus.SOLD, CalfStatus.DECEASED, CalfStatus.FEEDING,
    }),
    CalfStatus.SOLD: frozenset(),
    CalfStatus.DECEASED: frozenset(),
}

_STATUS_ALIASES = {
    "dead": CalfStatus.DECEASED,
    "shipped out": CalfStatus.SHIPPED,
}


def _squash(value: object) -> str:
    if isinstance(value, Enum):
        value = value.value
    text = str(value if value is not None else "").strip().lower()
    return re.sub(r"[\s_-]+", " ", text).strip()


def parse_status(value: object) -> CalfStatus:
    key = _squash(value)
    if key in _STATUS_ALIASES:
        return _STATUS_ALIASES[key]
    for status in CalfStatus:
        if status.value == key:
            return status
    raise FieldValidationError(f"Invalid calf status '{value}'", "status", value)


def parse_sell_status(value: object) -> SellStatus:
    key = _squash(value)
    for status in SellStatus:
        if status.value == key:
            return status
    raise FieldValidationError(
        f"Invalid sell status '{value}'", "sell_status", value,
    )


def parse_sex(value: object) -> Sex:
    key = _squash(value).replace(" ", "")
    for sex in Sex:
        if sex.value.lower() == key:
            return sex
    raise FieldValidationError(f"Invalid sex '{value}'", "sex", value)


def parse_calf_type(value: object) -> CalfType:
    key = str(value).strip() if value is not None else ""
    if key.endswith(".0"):
        key = key[:-2]
    for calf_type in CalfType:
        if calf_type.value == key:
            return calf_type
    raise FieldValidationError(
        f"Invalid calf type '{value}'", "calf_type", value,
    )


def parse_arrival_status(value: object) -> ArrivalStatus | None:
    """'Not in load' → NOT_IN_LOAD; None/blank clears the flag."""
    key = _squash(value).replace(" ", "_")
    if not key:
        return None
    for status in ArrivalStatus:
        if status.value == key:
            return status
    raise FieldValidationError(
        f"Invalid arrival status '{value}'", "arrival_status", value,
    )


def derive_sell_status(status: CalfStatus, explicit: SellStatus | None = None) -> SellStatus:
    if explicit is not None:
        return explicit
    return SellStatus.SOLD if status == CalfStatus.SOLD else SellStatus.OPEN


def is_lifecycle_transition(current: CalfStatus, target: CalfStatus) -> bool:
    return target in LIFECYCLE_TRANSITIONS.get(current, frozenset())


def movement_type_for_status(target: CalfStatus) -> MovementType:
    if target == CalfStatus.DECEASED:
        return MovementType.DEATH
    if target == CalfStatus.SHIPPED:
        return MovementType.SHIPPED_OUT
    return MovementType.STATUS_CHANGE
