"""Ranch Service — ranch registry with ordered weight brackets and price periods.

Invariants:
    - Ranch names are trimmed and unique case-insensitively (ConflictError)
    - weight_brackets / price_periods in a payload REPLACE the stored lists
    - Every ranch keeps at least one price period (a default one on create)
    - Deleting a ranch is one DELETE statement: the database cascades layout
      rows and nulls calf/load/history references (ON DELETE rules)
    - Every write is one unit of work (services/unit_of_work.py)

Design Decisions:
    - Layout normalisation is pure (core/ranch_layouts.py); this module only
      maps the normalised dicts onto child rows
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from calftrack.core.errors import ConflictError, FieldValidationError, ResourceNotFoundError
from calftrack.core.name_canonicalization import normalize_whitespace
from calftrack.core.ranch_layouts import (
    default_price_periods,
    normalize_price_periods,
    normalize_weight_brackets,
)
from calftrack.models.ranch import Ranch
from calftrack.models.ranch_price_period import RanchPricePeriod
from calftrack.models.ranch_weight_bracket import RanchWeightBracket
from calftrack.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

RANCH_FIELDS = ("name", "address", "city", "state", "zip_code", "manager", "color")


def _clean(value: object) -> str | None:
    text = normalize_whitespace(value)
    return text or None


class RanchService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _ensure_unique_name(self, raw_name: object, exclude_id: int | None = None) -> str:
        name = _clean(raw_name)
        if not name:
            raise FieldValidationError("Ranch name is required", "name", raw_name)
        query = select(Ranch.id).where(func.lower(Ranch.name) == name.lower())
        if exclude_id is not None:
            query = query.where(Ranch.id != exclude_id)
        if (await self.db.execute(query)).first() is not None:
            raise ConflictError(f"Ranch '{name}' already exists", "name", name)
        return name

    async def create(self, payload: dict, created_by: str | None = None) -> Ranch:
        async with unit_of_work(self.db, "create_ranch"):
            name = await self._ensure_unique_name(payload.get("name"))
            brackets = normalize_weight_brackets(payload.get("weight_brackets"))
            periods = normalize_price_periods(payload.get("price_periods"))
            if not periods:
                periods = default_price_periods(has_weight_brackets=bool(brackets))

            ranch = Ranch(
                name=name,
                **{field: _clean(payload.get(field)) for field in RANCH_FIELDS if field != "name"},
                created_by=created_by,
            )
            ranch.weight_brackets = [RanchWeightBracket(**item) for item in brackets]
            ranch.price_periods = [RanchPricePeriod(**item) for item in periods]
            self.db.add(ranch)
        logger.info(f"Ranch '{name}' created", extra={"ranch_id": ranch.id})
        return ranch

    async def find_all(self) -> list[Ranch]:
        result = await self.db.execute(select(Ranch).order_by(Ranch.name, Ranch.id))
        return list(result.scalars().all())

    async def find_one(self, ranch_id: int) -> Ranch:
        ranch = await self.db.get(Ranch, ranch_id)
        if ranch is None:
            raise ResourceNotFoundError("Ranch", ranch_id)
        return ranch

    async def update(self, ranch_id: int, changes: dict) -> Ranch:
        async with unit_of_work(self.db, "update_ranch", ranch_id=ranch_id):
            ranch = await self.find_one(ranch_id)
            if "name" in changes:
                ranch.name = await self._ensure_unique_name(
                    changes["name"], exclude_id=ranch.id,
                )
            for field in RANCH_FIELDS:
                if field != "name" and field in changes:
                    setattr(ranch, field, _clean(changes[field]))

            if "weight_brackets" in changes:
                ranch.weight_brackets = [
                    RanchWeightBracket(**item)
                    for item in normalize_weight_brackets(changes["weight_brackets"])
                ]
            if "price_periods" in changes:
                periods = normalize_price_periods(changes["price_periods"])
                if not periods:
                    periods = default_price_periods(
                        has_weight_brackets=bool(ranch.weight_brackets),
                    )
                ranch.price_periods = [RanchPricePeriod(**item) for item in periods]
        return ranch

    async def delete(self, ranch_id: int) -> dict:
        async with unit_of_work(self.db, "delete_ranch", ranch_id=ranch_id):
            ranch = await self.find_one(ranch_id)
            await self.db.execute(delete(Ranch).where(Ranch.id == ranch.id))
        logger.info(f"Ranch {ranch_id} deleted", extra={"ranch_id": ranch_id})
        return {"id": ranch_id}
