"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Foreign-key delete behaviour is declared on the columns (ondelete=...)
      and enforced by the database, never re-implemented in services

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from calftrack.models.ranch import Ranch  # noqa: F401
from calftrack.models.ranch_weight_bracket import RanchWeightBracket  # noqa: F401
from calftrack.models.ranch_price_period import RanchPricePeriod  # noqa: F401
from calftrack.models.breed import Breed  # noqa: F401
from calftrack.models.seller import Seller  # noqa: F401
from calftrack.models.calf import Calf  # noqa: F401
from calftrack.models.load import Load  # noqa: F401
from calftrack.models.calf_load import CalfLoad  # noqa: F401
from calftrack.models.calf_movement import CalfMovementHistory  # noqa: F401
