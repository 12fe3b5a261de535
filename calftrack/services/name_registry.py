"""Name Registry — canonical master data (breeds, sellers) behind one generic service.

Invariants:
    - Stored names are canonical (core/name_canonicalization.py); comparisons
      use identity keys, never raw text
    - identity_key is unique in the database: concurrent ensure_name calls for
      the same text converge on one row (insert inside a SAVEPOINT, read the
      winner on IntegrityError)
    - ensure_name never inserts in catalog-only mode (allow_create=False)
    - All writes happen in the caller's session; the caller owns the commit

Design Decisions:
    - One NameRegistry parameterised by a payload normaliser and an identity-key
      function; breed_registry() and seller_registry() are the two instances
    - ensure_name falls back to a name-only match, so "Smith" resolves to a
      seller registered with a full address
    - MasterDataResolver adapts the registries to CanonicalNameResolver for the ledger
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from calftrack.core.domain_types import RegistryKind
from calftrack.core.errors import ConflictError, FieldValidationError, ResourceNotFoundError
from calftrack.core.name_canonicalization import (
    best_fuzzy_match,
    breed_identity_key,
    canonical_name,
    lookup_key,
    normalize_order_index,
    normalize_seller_fields,
    seller_identity_key,
)
from calftrack.models.breed import Breed
from calftrack.models.seller import Seller
from calftrack.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrySpec:
    """How one master-data table is normalised and identified."""
    kind: RegistryKind
    model: type
    label: str
    normalize: Callable[[dict], dict]
    identity_key: Callable[[dict], str]
    order_column: str | None = None


def _normalize_breed(payload: dict) -> dict:
    values = {"name": canonical_name(payload.get("name"))}
    order_index = normalize_order_index(payload.get("order_index"))
    if order_index is not None:
        values["order_index"] = order_index
    return values


def _normalize_seller(payload: dict) -> dict:
    return normalize_seller_fields(
        payload.get("name"), payload.get("address"), payload.get("city"),
        payload.get("state"), payload.get("zip_code"),
    )


BREEDS = RegistrySpec(
    kind=RegistryKind.BREED,
    model=Breed,
    label="Breed",
    normalize=_normalize_breed,
    identity_key=lambda values: breed_identity_key(values.get("name")),
    order_column="order_index",
)

SELLERS = RegistrySpec(
    kind=RegistryKind.SELLER,
    model=Seller,
    label="Seller",
    normalize=_normalize_seller,
    identity_key=lambda values: seller_identity_key(
        values.get("name"), values.get("address"), values.get("city"),
        values.get("state"), values.get("zip_code"),
    ),
)


class NameRegistry:
    """CRUD plus lookup-or-create for one canonical master-data table."""

    def __init__(self, db: AsyncSession, spec: RegistrySpec):
        self.db = db
        self.spec = spec
        self.model = spec.model

    # ─── Queries ─────────────────────────────────────────────────

    async def find_all(self) -> list:
        query = select(self.model)
        if self.spec.order_column:
            query = query.order_by(getattr(self.model, self.spec.order_column))
        query = query.order_by(self.model.name, self.model.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_one(self, item_id: int):
        item = await self.db.get(self.model, item_id)
        if item is None:
            raise ResourceNotFoundError(self.spec.label, item_id)
        return item

    async def _find_by_key(self, key: str, ignore_id: int | None = None):
        query = select(self.model).where(self.model.identity_key == key)
        if ignore_id is not None:
            query = query.where(self.model.id != ignore_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    # ─── Commands ────────────────────────────────────────────────

    def _prepare(self, payload: dict) -> dict:
        values = self.spec.normalize(payload)
        if not values.get("name"):
            raise FieldValidationError(
                f"{self.spec.label} name is required", "name", payload.get("name"),
            )
        values["identity_key"] = self.spec.identity_key(values)
        return values

    async def _next_order_index(self) -> int:
        column = getattr(self.model, self.spec.order_column)
        result = await self.db.execute(select(func.max(column)))
        current = result.scalar()
        return 0 if current is None else int(current) + 1

    async def create(self, payload: dict):
        async with unit_of_work(self.db, f"create_{self.spec.kind.value}"):
            values = self._prepare(payload)
            if await self._find_by_key(values["identity_key"]) is not None:
                raise ConflictError(
                    f"{self.spec.label} already exists", "name", values["name"],
                )
            if self.spec.order_column and values.get(self.spec.order_column) is None:
                values[self.spec.order_column] = await self._next_order_index()
            item = self.model(**values)
            self.db.add(item)
        return item

    async def update(self, item_id: int, changes: dict):
        async with unit_of_work(self.db, f"update_{self.spec.kind.value}"):
            item = await self.find_one(item_id)
            current = {
                column: getattr(item, column)
                for column in ("name", "address", "city", "state", "zip_code", "order_index")
                if hasattr(item, column)
            }
            values = self._prepare({**current, **changes})
            if await self._find_by_key(values["identity_key"], ignore_id=item.id) is not None:
                raise ConflictError(
                    f"{self.spec.label} already exists", "name", values["name"],
                )
            for column, value in values.items():
                setattr(item, column, value)
        return item

    async def delete(self, item_id: int) -> dict:
        async with unit_of_work(self.db, f"delete_{self.spec.kind.value}"):
            item = await self.find_one(item_id)
            await self.db.execute(delete(self.model).where(self.model.id == item.id))
        return {"id": item_id}

    # ─── Lookup-or-create ────────────────────────────────────────

    async def ensure_name(
        self, raw_name: Any, allow_create: bool = True, fuzzy: bool = False,
    ) -> str | None:
        """Existing canonical name for raw_name, creating it when allowed.

        Returns None for blank input, or in catalog-only mode when nothing matches.
        """
        values = self.spec.normalize({"name": raw_name})
        if not values.get("name"):
            return None
        key = self.spec.identity_key(values)

        existing = await self._find_by_key(key)
        if existing is not None:
            return existing.name

        names = await self._all_names()
        target = lookup_key(values["name"])
        for name in names:
            if lookup_key(name) == target:
                return name

        if fuzzy:
            match = best_fuzzy_match(values["name"], names)
            if match is not None:
                return match

        if not allow_create:
            return None

        return (await self._insert_or_get(values, key)).name

    async def _all_names(self) -> list[str]:
        result = await self.db.execute(select(self.model.name).order_by(self.model.id))
        return list(result.scalars().all())

    async def _insert_or_get(self, values: dict, key: str):
        values = {**values, "identity_key": key}
        if self.spec.order_column and values.get(self.spec.order_column) is None:
            values[self.spec.order_column] = await self._next_order_index()
        try:
            async with self.db.begin_nested():
                item = self.model(**values)
                self.db.add(item)
                await self.db.flush()
        except IntegrityError:
            winner = await self._find_by_key(key)
            if winner is None:
                raise
            logger.info(
                f"{self.spec.label} '{values['name']}' created concurrently, reusing",
                extra={"registry": self.spec.kind.value},
            )
            return winner
        logger.info(
            f"{self.spec.label} '{values['name']}' registered",
            extra={"registry": self.spec.kind.value},
        )
        return item


def breed_registry(db: AsyncSession) -> NameRegistry:
    return NameRegistry(db, BREEDS)


def seller_registry(db: AsyncSession) -> NameRegistry:
    return NameRegistry(db, SELLERS)


class MasterDataResolver:
    """CanonicalNameResolver over the breed and seller registries."""

    def __init__(
        self, db: AsyncSession, allow_create: bool = True, fuzzy: bool = False,
    ):
        self._registries = {
            RegistryKind.BREED: breed_registry(db),
            RegistryKind.SELLER: seller_registry(db),
        }
        self.allow_create = allow_create
        self.fuzzy = fuzzy

    async def ensure_canonical_name(
        self, kind: RegistryKind, raw_text: str,
    ) -> str | None:
        return await self._registries[kind].ensure_name(
            raw_text, allow_create=self.allow_create, fuzzy=self.fuzzy,
        )
