"""Ranch Layouts — bracket/period normalisation and rolling date ranges.

Tests:
    - Brackets get positional order and de-duplicated breeds
    - Periods get strictly increasing starts and derived end dates
    - Default period follows the bracket layout
"""

from datetime import date

from calftrack.core.ranch_layouts import (
    apply_rolling_date_ranges,
    default_price_periods,
    normalize_price_periods,
    normalize_weight_brackets,
)


def test_weight_brackets_are_ordered_and_cleaned():
    brackets = normalize_weight_brackets([
        {"key": "light", "min": "0", "max": 300, "breeds": ["Angus", "angus", " "]},
        {"label": "Heavy", "min": 301, "max": None},
    ])
    assert [b["order_index"] for b in brackets] == [0, 1]
    assert brackets[0]["label"] == "Category 1"
    assert brackets[0]["min_weight"] == 0.0
    assert brackets[0]["breeds"] == ["Angus"]
    assert brackets[1]["bracket_key"] is None
    assert brackets[1]["max_weight"] is None


def test_rolling_dates_force_increasing_starts():
    rolled = apply_rolling_date_ranges([
        {"start_date": date(2024, 1, 1)},
        {"start_date": date(2023, 12, 1)},
        {"start_date": date(2024, 3, 1)},
    ])
    assert [p["start_date"] for p in rolled] == [
        date(2024, 1, 1), date(2024, 1, 2), date(2024, 3, 1),
    ]
    assert [p["end_date"] for p in rolled] == [
        date(2024, 1, 1), date(2024, 2, 29), None,
    ]


def test_price_periods_parse_dates_and_layout():
    periods = normalize_price_periods([
        {"key": "spring", "start_date": "2024-03-01", "purchase_price": "2.5",
         "layout_mode": "WEIGHT", "sheet_data": {"rows": [1]}},
    ])
    assert periods[0]["start_date"] == date(2024, 3, 1)
    assert periods[0]["end_date"] is None
    assert periods[0]["purchase_price"] == 2.5
    assert periods[0]["layout_mode"] == "weight"
    assert periods[0]["sheet_data"] == {"rows": [1]}


def test_default_period_follows_bracket_layout():
    assert default_price_periods(True)[0]["layout_mode"] == "weight"
    assert default_price_periods(False)[0]["layout_mode"] == "single"
