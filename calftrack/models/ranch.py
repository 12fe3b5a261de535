"""Ranch ORM — a location calves and loads point at.

Invariants:
    - name is unique (case-insensitive uniqueness checked by RanchService)
    - A ranch owns its weight brackets and price periods (DB cascade)
    - A ranch owns no calves or loads: their references are SET NULL on delete

Design Decisions:
    - Layout children loaded with selectin: every ranch projection needs them
    - passive_deletes: the database performs the cascade, the ORM never
      issues per-child deletes
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from calftrack.db.base import Base, utcnow


class Ranch(Base):
    __tablename__ = "ranches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    address: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(40), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    manager: Mapped[str | None] = mapped_column(String(120), nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    weight_brackets: Mapped[list["RanchWeightBracket"]] = relationship(
        "RanchWeightBracket", back_populates="ranch",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="RanchWeightBracket.order_index", lazy="selectin",
    )
    price_periods: Mapped[list["RanchPricePeriod"]] = relationship(
        "RanchPricePeriod", back_populates="ranch",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="RanchPricePeriod.order_index", lazy="selectin",
    )
