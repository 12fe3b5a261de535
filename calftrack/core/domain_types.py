"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - RanchId, CalfId, LoadId wrap integer primary keys
    - All valid states encoded as Enums — no raw string matching
    - Enum values are exactly what the database stores

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RanchId = NewType("RanchId", int)
CalfId = NewType("CalfId", int)
LoadId = NewType("LoadId", int)


# ─── Enums ───────────────────────────────────────────────────────

class CalfStatus(str, Enum):
    """Calf lifecycle states — maps to calves.status."""
    FEEDING = "feeding"
    SHIPPED = "shipped"
    ALIVE = "alive"
    DECEASED = "deceased"
    SOLD = "sold"


class SellStatus(str, Enum):
    """Derived commercial state — sold only when the calf was sold."""
    OPEN = "open"
    SOLD = "sold"


class Sex(str, Enum):
    BULL = "bull"
    HEIFER = "heifer"
    STEER = "steer"
    FREE_MARTIN = "freeMartin"


class CalfType(str, Enum):
    TYPE_1 = "1"
    TYPE_2 = "2"


class ArrivalStatus(str, Enum):
    """Post-arrival paperwork flag on a calf-load link."""
    DOA = "doa"
    ISSUE = "issue"
    NOT_IN_LOAD = "not_in_load"


class MovementType(str, Enum):
    """Kinds of append-only movement history rows."""
    INTAKE = "intake"
    LOAD_TRANSFER = "load_transfer"
    RANCH_TRANSFER = "ranch_transfer"
    STATUS_CHANGE = "status_change"
    DEATH = "death"
    SHIPPED_OUT = "shipped_out"


class LoadStatus(str, Enum):
    """Derived shipment state — never stored."""
    DRAFT = "draft"
    IN_TRANSIT = "in_transit"
    ARRIVED = "arrived"
    CANCELED = "canceled"


class LayoutMode(str, Enum):
    """Price sheet layout for a ranch price period."""
    SINGLE = "single"
    WEIGHT = "weight"


class RegistryKind(str, Enum):
    """Master-data registries resolvable by canonical name."""
    BREED = "breed"
    SELLER = "seller"
