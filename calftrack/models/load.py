"""Load ORM — a single shipment event from an origin ranch to a destination.

Invariants:
    - origin_ranch_id required at creation (nullable only for ranch SET NULL)
    - destination_ranch_id or destination_name present (CHECK constraint)
    - A load owns its CalfLoad rows (DB cascade); history rows survive with
      load_id nulled

Design Decisions:
    - destination_name also stores the destination ranch's name at shipment
      time, so the label survives a later ranch rename or delete
"""

from datetime import datetime

from sqlalchemy import (
    String, Integer, Text, DateTime, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from calftrack.db.base import Base, utcnow


class Load(Base):
    __tablename__ = "loads"
    __table_args__ = (
        CheckConstraint(
            "destination_ranch_id IS NOT NULL OR destination_name IS NOT NULL",
            name="has_destination",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    origin_ranch_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="SET NULL"), nullable=True,
        index=True,
    )
    destination_ranch_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="SET NULL"), nullable=True,
        index=True,
    )
    destination_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    departure_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    arrival_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    after_arrival_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    trucking: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
