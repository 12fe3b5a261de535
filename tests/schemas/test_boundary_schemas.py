"""Boundary schemas — request shape checks and computed response fields.

Invariants:
    - RanchCreate.name is stripped and may not be blank
    - CalfBulkCreate holds 1..5000 records
    - CalfResponse.days_on_feed stops counting at shipment or death
    - LoadCreate selectors default to empty (zero-calf loads are valid)
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from calftrack.schemas.calf import CalfBulkCreate, CalfCreate, CalfResponse
from calftrack.schemas.load import LoadCreate
from calftrack.schemas.ranch import RanchCreate

STAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _calf_row(**fields) -> dict:
    return {
        "id": 1, "primary_id": "A", "eid": None, "original_id": None,
        "placed_date": datetime(2024, 3, 1, tzinfo=timezone.utc),
        "breed": "Angus", "sex": "steer", "price": None, "sell_price": None,
        "weight": None, "seller": "Smith Farms", "dairy": None,
        "current_ranch_id": 1, "origin_ranch_id": 1, "status": "feeding",
        "sell_status": "open", "condition": None, "calf_type": None,
        "pre_days_on_feed": 5, "death_date": None, "shipped_out_date": None,
        "shipped_to": None, "created_by": None,
        "created_at": STAMP, "updated_at": STAMP,
        **fields,
    }


# ─── RanchCreate ────────────────────────────────────────────────

def test_ranch_name_is_stripped():
    assert RanchCreate(name="  North  ").name == "North"


def test_ranch_name_whitespace_only_rejected():
    with pytest.raises(ValidationError):
        RanchCreate(name="   ")


# ─── Calf intake ────────────────────────────────────────────────

def test_calf_create_accepts_numeric_identifiers_and_serial_dates():
    calf = CalfCreate(
        primary_id=17, eid=982000000000017, breed="angus", sex="bull",
        seller="smith", current_ranch_id=1, placed_date=45352,
    )
    assert calf.primary_id == 17
    assert calf.placed_date == 45352


def test_calf_create_rejects_negative_pre_days():
    with pytest.raises(ValidationError):
        CalfCreate(
            primary_id="A", breed="angus", sex="bull", seller="smith",
            current_ranch_id=1, pre_days_on_feed=-1,
        )


def test_bulk_intake_needs_at_least_one_record():
    with pytest.raises(ValidationError):
        CalfBulkCreate(calves=[])


# ─── CalfResponse.days_on_feed ──────────────────────────────────

def test_days_on_feed_counts_until_death():
    calf = CalfResponse(**_calf_row(
        status="deceased", death_date=datetime(2024, 3, 10, tzinfo=timezone.utc),
    ))
    assert calf.days_on_feed == 15


def test_days_on_feed_counts_until_shipped_out():
    calf = CalfResponse(**_calf_row(
        status="shipped", shipped_out_date=datetime(2024, 3, 1, tzinfo=timezone.utc),
    ))
    assert calf.days_on_feed == 6


def test_days_on_feed_without_placement_is_pre_days():
    assert CalfResponse(**_calf_row(placed_date=None)).days_on_feed == 5


# ─── LoadCreate ─────────────────────────────────────────────────

def test_load_create_selectors_default_empty():
    load = LoadCreate(origin_ranch_id=1, destination_name="Sale barn", departure_date="2024-04-01")
    assert load.eids == []
    assert load.primary_ids == []


def test_load_create_requires_departure_date_field():
    with pytest.raises(ValidationError):
        LoadCreate(origin_ranch_id=1, destination_ranch_id=2)
