"""CalfLoad ORM — proof that a calf traveled on a load.

Invariants:
    - (load_id, calf_id) unique: one link per calf per shipment
    - days_on_feed_at_shipment is a snapshot taken at insertion
    - arrival_status is paperwork only; it never changes the calf's status
"""

from sqlalchemy import String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from calftrack.db.base import Base


class CalfLoad(Base):
    __tablename__ = "calf_loads"
    __table_args__ = (
        UniqueConstraint("load_id", "calf_id", name="uq_calf_loads_load_calf"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    load_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("loads.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
    calf_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("calves.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
    days_on_feed_at_shipment: Mapped[int | None] = mapped_column(Integer, nullable=True)
    arrival_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
