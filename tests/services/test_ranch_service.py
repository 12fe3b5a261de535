"""Ranch Service — registry rules, layout replacement, and delete semantics.

Invariants:
    - Names are unique case-insensitively
    - A new ranch always has a price period
    - Deleting a ranch nulls calf/load references; it never deletes calves
"""

from datetime import date

import pytest
from sqlalchemy import select

from calftrack.core.errors import ConflictError, FieldValidationError, ResourceNotFoundError
from calftrack.core.load_selection import LoadSelector
from calftrack.models.calf import Calf
from calftrack.models.calf_movement import CalfMovementHistory
from calftrack.models.load import Load
from calftrack.models.ranch_price_period import RanchPricePeriod
from calftrack.models.ranch_weight_bracket import RanchWeightBracket
from calftrack.services.ranch_service import RanchService
from calftrack.services.transfer_engine import TransferEngine


async def test_create_trims_fields_and_adds_default_period(test_session_factory):
    async with test_session_factory() as session:
        ranch = await RanchService(session).create(
            {"name": "  North   Pasture ", "city": " Amarillo ", "manager": ""},
            created_by="Dana",
        )

    assert ranch.name == "North Pasture"
    assert ranch.city == "Amarillo"
    assert ranch.manager is None
    assert ranch.created_by == "Dana"
    assert len(ranch.price_periods) == 1
    assert ranch.price_periods[0].layout_mode == "single"


async def test_create_with_layouts(test_session_factory):
    async with test_session_factory() as session:
        ranch = await RanchService(session).create({
            "name": "North",
            "weight_brackets": [{"key": "light", "label": "Light", "min": 0, "max": 300}],
            "price_periods": [
                {"label": "Spring", "start_date": "2024-03-01", "layout_mode": "weight"},
                {"label": "Summer", "start_date": "2024-06-01"},
            ],
        })

    assert [b.label for b in ranch.weight_brackets] == ["Light"]
    assert ranch.price_periods[0].end_date == date(2024, 5, 31)
    assert ranch.price_periods[1].end_date is None


async def test_duplicate_name_is_conflict(test_session_factory):
    async with test_session_factory() as session:
        service = RanchService(session)
        await service.create({"name": "North Pasture"})
        with pytest.raises(ConflictError):
            await service.create({"name": "north pasture"})


async def test_blank_name_is_validation_error(test_session_factory):
    async with test_session_factory() as session:
        with pytest.raises(FieldValidationError):
            await RanchService(session).create({"name": "   "})


async def test_update_replaces_layout_lists(test_session_factory):
    async with test_session_factory() as session:
        service = RanchService(session)
        ranch = await service.create({
            "name": "North",
            "weight_brackets": [{"label": "A"}, {"label": "B"}],
        })
        updated = await service.update(ranch.id, {
            "manager": "Lee",
            "weight_brackets": [{"label": "C"}],
            "price_periods": [],
        })

    assert updated.manager == "Lee"
    assert [b.label for b in updated.weight_brackets] == ["C"]
    assert len(updated.price_periods) == 1

    async with test_session_factory() as session:
        brackets = (await session.execute(select(RanchWeightBracket))).scalars().all()
        periods = (await session.execute(select(RanchPricePeriod))).scalars().all()
    assert [b.label for b in brackets] == ["C"]
    assert len(periods) == 1


async def test_rename_to_own_name_is_allowed(test_session_factory):
    async with test_session_factory() as session:
        service = RanchService(session)
        ranch = await service.create({"name": "North"})
        updated = await service.update(ranch.id, {"name": "NORTH"})
    assert updated.name == "NORTH"


async def test_delete_ranch_nulls_references_and_keeps_calves(
    test_session_factory, ranches, make_calf,
):
    calf_id = await make_calf(ranches["north"], "A")
    async with test_session_factory() as session:
        await TransferEngine(session).create_load(
            origin_ranch_id=ranches["north"], destination_ranch_id=ranches["south"],
            departure_date="2024-04-01", selector=LoadSelector.build(None, ["A"]),
        )

    async with test_session_factory() as session:
        await RanchService(session).delete(ranches["south"])

    async with test_session_factory() as session:
        calf = await session.get(Calf, calf_id)
        load = (await session.execute(select(Load))).scalar_one()
        transfer = (await session.execute(
            select(CalfMovementHistory).where(
                CalfMovementHistory.movement_type == "load_transfer",
            ),
        )).scalar_one()

    assert calf is not None
    assert calf.current_ranch_id is None
    assert calf.origin_ranch_id == ranches["north"]
    assert load.destination_ranch_id is None
    assert load.destination_name == "South Feedyard"
    assert transfer.to_ranch_id is None


async def test_delete_and_find_missing_ranch(test_session_factory):
    async with test_session_factory() as session:
        service = RanchService(session)
        with pytest.raises(ResourceNotFoundError):
            await service.find_one(404)
        with pytest.raises(ResourceNotFoundError):
            await service.delete(404)
