"""Reporting — calf timelines, load projections, and ranch dashboard cards.

Invariants:
    - Timelines come from history rows alone, in event order
    - Load status and head count are derived on read
"""

import pytest
from sqlalchemy import update

from calftrack.core.errors import ResourceNotFoundError
from calftrack.core.load_selection import LoadSelector
from calftrack.core.movement_events import Intake, LoadTransfer
from calftrack.models.calf import Calf
from calftrack.services.reporting import ReportingService
from calftrack.services.transfer_engine import TransferEngine


async def _ship(session_factory, origin, dest, *primary_ids, notes=None):
    async with session_factory() as session:
        result = await TransferEngine(session).create_load(
            origin_ranch_id=origin, destination_ranch_id=dest,
            departure_date="2024-04-01", notes=notes,
            selector=LoadSelector.build(None, primary_ids),
        )
        return result.load.id


async def test_movement_history_ignores_current_calf_state(
    test_session_factory, ranches, make_calf,
):
    calf_id = await make_calf(ranches["north"], "A")
    await _ship(test_session_factory, ranches["north"], ranches["south"], "A")
    async with test_session_factory() as session:
        await session.execute(
            update(Calf).where(Calf.id == calf_id).values(current_ranch_id=None),
        )
        await session.commit()

    async with test_session_factory() as session:
        events = await ReportingService(session).get_movement_history(calf_id)

    assert [type(e) for e in events] == [Intake, LoadTransfer]
    assert events[1].to_ranch_id == ranches["south"]
    assert events[1].to_status.value == "shipped"


async def test_movement_history_for_missing_calf(test_session_factory):
    async with test_session_factory() as session:
        with pytest.raises(ResourceNotFoundError):
            await ReportingService(session).get_movement_history(404)


async def test_find_load_projection(test_session_factory, ranches, make_calf):
    await make_calf(ranches["north"], "A")
    await make_calf(ranches["north"], "B")
    load_id = await _ship(test_session_factory, ranches["north"], ranches["south"], "A", "B")

    async with test_session_factory() as session:
        view = await ReportingService(session).find_load(load_id)

    assert view["status"] == "in_transit"
    assert view["head_count"] == 2
    assert view["origin_ranch_name"] == "North Pasture"
    assert view["destination_label"] == "South Feedyard"
    assert [c["primary_id"] for c in view["calves"]] == ["A", "B"]
    assert view["calves"][0]["days_on_feed_at_shipment"] == 32


async def test_canceled_and_draft_loads(test_session_factory, ranches, make_calf):
    await make_calf(ranches["north"], "A")
    canceled = await _ship(
        test_session_factory, ranches["north"], ranches["south"], "A", notes="Canceled - weather",
    )
    draft = await _ship(test_session_factory, ranches["north"], ranches["south"])

    async with test_session_factory() as session:
        reporting = ReportingService(session)
        assert (await reporting.find_load(canceled))["status"] == "canceled"
        assert (await reporting.find_load(draft))["status"] == "draft"


async def test_loads_by_ranch_direction(test_session_factory, ranches, make_calf):
    await make_calf(ranches["north"], "A")
    load_id = await _ship(test_session_factory, ranches["north"], ranches["south"], "A")

    async with test_session_factory() as session:
        reporting = ReportingService(session)
        sent = await reporting.find_loads_by_ranch(ranches["north"])
        received = await reporting.find_loads_by_ranch(ranches["south"])

    assert [(v["id"], v["direction"], v["counterpart_name"]) for v in sent] == [
        (load_id, "sent", "South Feedyard"),
    ]
    assert [(v["direction"], v["counterpart_name"], v["head_count"]) for v in received] == [
        ("received", "North Pasture", 1),
    ]


async def test_loads_by_missing_ranch(test_session_factory):
    async with test_session_factory() as session:
        with pytest.raises(ResourceNotFoundError):
            await ReportingService(session).find_loads_by_ranch(404)


async def test_ranch_summaries(test_session_factory, ranches, make_ranch, make_calf):
    await make_ranch("Empty Range")
    await make_calf(ranches["north"], "A")
    await make_calf(ranches["north"], "B")
    await _ship(test_session_factory, ranches["north"], ranches["south"], "B")

    async with test_session_factory() as session:
        summaries = {s["name"]: s for s in await ReportingService(session).ranch_summaries()}

    north = summaries["North Pasture"]
    assert (north["total_cattle"], north["active_loads"], north["status"]) == (1, 1, "Active")
    south = summaries["South Feedyard"]
    assert (south["total_cattle"], south["status"]) == (0, "Inactive")
    assert south["last_activity"] is not None
    assert summaries["Empty Range"]["last_activity"] is None
