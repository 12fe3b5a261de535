"""RanchPricePeriod ORM — a dated purchase/sell price window for a ranch.

Invariants:
    - start_date strictly increases with order_index; end_date is the day before
      the next period's start (rolling ranges, see core/ranch_layouts.py)
"""

from datetime import date

from sqlalchemy import String, Integer, Numeric, Date, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from calftrack.db.base import Base


class RanchPricePeriod(Base):
    __tablename__ = "ranch_price_periods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ranch_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
    period_key: Mapped[str | None] = mapped_column(String(60), nullable=True)
    label: Mapped[str] = mapped_column(String(120), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    sell_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    layout_mode: Mapped[str] = mapped_column(String(10), nullable=False, default="single")
    sheet_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    ranch: Mapped["Ranch"] = relationship("Ranch", back_populates="price_periods")
