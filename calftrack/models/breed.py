"""Breed ORM — canonical breed names.

Invariants:
    - identity_key is unique: the race backstop for concurrent ensure_name calls
    - order_index drives display order (auto max+1 when omitted)
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from calftrack.db.base import Base, utcnow


class Breed(Base):
    __tablename__ = "breeds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    identity_key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
