"""CalfMovementHistory ORM — append-only audit trail of location/status changes.

Invariants:
    - Rows are inserted, never updated or deleted by application code
    - Each row is a self-contained snapshot (from/to ranch and status at the time)
    - Ordered by (event_date, id) they reconstruct a calf's full timeline
    - Typed view of a row lives in core/movement_events.py

Design Decisions:
    - load_id SET NULL on load delete: the trail outlives the shipment record
    - ranch references SET NULL on ranch delete for the same reason
"""

from datetime import datetime

from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from calftrack.db.base import Base, utcnow


class CalfMovementHistory(Base):
    __tablename__ = "calf_movement_history"
    __table_args__ = (
        Index("ix_calf_movement_history_calf_event", "calf_id", "event_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    calf_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("calves.id", ondelete="CASCADE"), nullable=False,
    )
    load_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("loads.id", ondelete="SET NULL"), nullable=True,
        index=True,
    )
    movement_type: Mapped[str] = mapped_column(String(20), nullable=False)
    event_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    from_ranch_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="SET NULL"), nullable=True,
    )
    to_ranch_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="SET NULL"), nullable=True,
    )
    from_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    to_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
