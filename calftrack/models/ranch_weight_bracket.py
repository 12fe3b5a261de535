"""RanchWeightBracket ORM — one labeled weight range of a ranch's price sheet."""

from sqlalchemy import String, Integer, Numeric, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from calftrack.db.base import Base


class RanchWeightBracket(Base):
    __tablename__ = "ranch_weight_brackets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ranch_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ranches.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
    bracket_key: Mapped[str | None] = mapped_column(String(60), nullable=True)
    label: Mapped[str] = mapped_column(String(120), nullable=False)
    min_weight: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    max_weight: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    breeds: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    ranch: Mapped["Ranch"] = relationship("Ranch", back_populates="weight_brackets")
