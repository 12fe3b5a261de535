"""Name Registry — canonical breeds/sellers, idempotent ensure_name, race fallback.

Invariants:
    - Equivalent spellings resolve to one stored row
    - A losing concurrent insert reads the winner instead of failing
    - Catalog-only lookups never insert
"""

import pytest
from sqlalchemy import func, select

from calftrack.core.domain_types import RegistryKind
from calftrack.core.errors import ConflictError, FieldValidationError, ResourceNotFoundError
from calftrack.core.name_canonicalization import breed_identity_key
from calftrack.models.breed import Breed
from calftrack.models.seller import Seller
from calftrack.services.name_registry import (
    MasterDataResolver,
    breed_registry,
    seller_registry,
)


async def _count(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count(model.id)))).scalar_one()


async def test_ensure_name_is_idempotent(test_session_factory):
    async with test_session_factory() as session:
        resolver = MasterDataResolver(session)
        names = [
            await resolver.ensure_canonical_name(RegistryKind.BREED, raw)
            for raw in ("bull", " BULL ", "Bull", "bull.")
        ]
        await session.commit()

    assert names == ["Bull"] * 4
    assert await _count(test_session_factory, Breed) == 1


async def test_ensure_name_blank_is_none(test_session_factory):
    async with test_session_factory() as session:
        assert await breed_registry(session).ensure_name("   ") is None


async def test_losing_insert_reads_the_winner(test_session_factory):
    async with test_session_factory() as session:
        winner = await breed_registry(session).create({"name": "Angus"})

    async with test_session_factory() as session:
        registry = breed_registry(session)
        values = {"name": "Angus"}
        item = await registry._insert_or_get(values, breed_identity_key("Angus"))
        await session.commit()

    assert item.id == winner.id
    assert await _count(test_session_factory, Breed) == 1


async def test_catalog_only_never_inserts(test_session_factory):
    async with test_session_factory() as session:
        name = await breed_registry(session).ensure_name("Wagyu", allow_create=False)
        await session.commit()

    assert name is None
    assert await _count(test_session_factory, Breed) == 0


async def test_seller_ensure_name_falls_back_to_name_only(test_session_factory):
    async with test_session_factory() as session:
        await seller_registry(session).create({
            "name": "smith farms", "city": "amarillo", "state": "tx",
        })

    async with test_session_factory() as session:
        name = await seller_registry(session).ensure_name("SMITH FARMS")
        await session.commit()

    assert name == "Smith Farms"
    assert await _count(test_session_factory, Seller) == 1


async def test_breed_order_index_auto_assigned(test_session_factory):
    async with test_session_factory() as session:
        registry = breed_registry(session)
        first = await registry.create({"name": "Angus"})
        second = await registry.create({"name": "Holstein"})
        pinned = await registry.create({"name": "Jersey", "order_index": 0})
        ordered = await registry.find_all()

    assert (first.order_index, second.order_index) == (0, 1)
    assert [b.name for b in ordered] == ["Angus", "Jersey", "Holstein"]
    assert pinned.order_index == 0


async def test_duplicate_breed_is_conflict(test_session_factory):
    async with test_session_factory() as session:
        registry = breed_registry(session)
        await registry.create({"name": "Angus"})
        with pytest.raises(ConflictError) as exc_info:
            await registry.create({"name": " ANGUS "})
    assert exc_info.value.field == "name"


async def test_sellers_differ_by_address(test_session_factory):
    async with test_session_factory() as session:
        registry = seller_registry(session)
        await registry.create({"name": "Smith Farms", "city": "Amarillo"})
        await registry.create({"name": "Smith Farms", "city": "Lubbock"})
        with pytest.raises(ConflictError):
            await registry.create({"name": "smith farms", "city": "AMARILLO"})

    assert await _count(test_session_factory, Seller) == 2


async def test_update_renames_and_recomputes_identity(test_session_factory):
    async with test_session_factory() as session:
        registry = breed_registry(session)
        breed = await registry.create({"name": "Angis"})
        updated = await registry.update(breed.id, {"name": "angus"})

    assert updated.name == "Angus"
    assert updated.identity_key == "angus"


async def test_update_into_existing_name_is_conflict(test_session_factory):
    async with test_session_factory() as session:
        registry = breed_registry(session)
        await registry.create({"name": "Angus"})
        other = await registry.create({"name": "Holstein"})
        with pytest.raises(ConflictError):
            await registry.update(other.id, {"name": "angus"})


async def test_create_requires_name(test_session_factory):
    async with test_session_factory() as session:
        with pytest.raises(FieldValidationError):
            await seller_registry(session).create({"name": "  "})


async def test_delete_and_not_found(test_session_factory):
    async with test_session_factory() as session:
        registry = breed_registry(session)
        breed = await registry.create({"name": "Angus"})
        assert await registry.delete(breed.id) == {"id": breed.id}
        with pytest.raises(ResourceNotFoundError):
            await registry.find_one(breed.id)
