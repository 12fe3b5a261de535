"""Date Values — intake date parsing and days-on-feed arithmetic.

Tests:
    - ISO, MM/DD/YYYY and spreadsheet serial inputs land on UTC midnight
    - Blank inputs are "no value", garbage raises FieldValidationError
    - days_on_feed counts the placement day and adds pre-days
"""

from datetime import date, datetime, timezone

import pytest

from calftrack.core.date_values import as_utc_date, days_on_feed, normalize_date_field
from calftrack.core.errors import FieldValidationError

MARCH_15 = datetime(2024, 3, 15, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", [
    "2024-03-15",
    "03/15/2024",
    45366,
    "45366",
    date(2024, 3, 15),
    datetime(2024, 3, 15, 17, 45),
])
def test_normalize_date_field_accepts_common_shapes(raw):
    assert normalize_date_field(raw, "placed_date") == MARCH_15


def test_normalize_date_field_converts_offsets_to_utc_day():
    assert normalize_date_field("2024-03-14T23:30:00-05:00", "placed_date") == MARCH_15


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_normalize_date_field_blank_is_none(raw):
    assert normalize_date_field(raw, "placed_date") is None


@pytest.mark.parametrize("raw", ["not a date", True, -4, "13/45/2024"])
def test_normalize_date_field_rejects_garbage(raw):
    with pytest.raises(FieldValidationError) as exc_info:
        normalize_date_field(raw, "death_date")
    assert exc_info.value.field == "death_date"


def test_as_utc_date_treats_naive_as_utc():
    assert as_utc_date(datetime(2024, 3, 15, 23, 0)) == date(2024, 3, 15)
    assert as_utc_date(None) is None


def test_days_on_feed_counts_placement_day():
    placed = datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert days_on_feed(placed, None, until=datetime(2024, 3, 10, tzinfo=timezone.utc)) == 10


def test_days_on_feed_adds_pre_days():
    placed = datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert days_on_feed(placed, 5, until=datetime(2024, 3, 10, tzinfo=timezone.utc)) == 15


def test_days_on_feed_without_placement_is_pre_days():
    assert days_on_feed(None, 3) == 3
    assert days_on_feed(None, None) == 0


def test_days_on_feed_never_below_one_after_placement():
    placed = datetime(2024, 3, 10, tzinfo=timezone.utc)
    assert days_on_feed(placed, 0, until=datetime(2024, 3, 1, tzinfo=timezone.utc)) == 1
