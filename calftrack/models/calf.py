"""Calf ORM — the mutable ledger entity: where an animal is and in what state.

Invariants:
    - current_ranch_id is required at intake; nullable only so a ranch delete
      can SET NULL instead of cascading into the ledger
    - status is one of CalfStatus; sell_status derived (sold iff status sold,
      unless set explicitly)
    - Dates are stored as UTC midnight timestamps
    - Movement history and load links cascade with the calf (DB-level)

Design Decisions:
    - Enum values stored as short strings (no native DB enums): portable between
      PostgreSQL and SQLite, validated in core/calf_lifecycle.py
    - No ORM relationships to history/links: the transfer engine writes them with
      explicit statements inside its unit of work
"""

from datetime import datetime

from sqlalchemy import String, Integer, Numeric, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from calftrack.db.base import Base, utcnow


class Calf(Base):
    __tablename__ = "calves"
    __table_args__ = (
        Index("ix_calves_status_eid", "status", "eid"),
        Index("ix_calves_status_primary_id", "status", "primary_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    primary_id: Mapped[str] = mapped_column(String(60), nullable=False)
    eid: Mapped[str | None] = mapped_column(String(60), nullable=True)
    original_id: Mapped[str | None] = mapped_column(String(60), nullable=True)
    placed_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    breed: Mapped[str] = mapped_column(String(120), nullable=False)
    sex: Mapped[str] = mapped_column(String(20), nullable=False)
    price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    sell_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    weight: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    seller: Mapped[str] = mapped_column(String(140), nullable=False)
    dairy: Mapped[str | None] = mapped_column(String(120), nullable=True)
    current_ranch_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="SET NULL"), nullable=True,
        index=True,
    )
    origin_ranch_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="SET NULL"), nullable=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="feeding")
    sell_status: Mapped[str] = mapped_column(String(10), nullable=False, default="open")
    condition: Mapped[str | None] = mapped_column(String(255), nullable=True)
    calf_type: Mapped[str | None] = mapped_column(String(2), nullable=True)
    pre_days_on_feed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    death_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    shipped_out_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    shipped_to: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
