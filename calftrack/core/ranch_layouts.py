"""Ranch Layouts — pure normalisation of weight brackets and price periods.

Invariants:
    - Output lists are ordered; order_index equals list position
    - Price periods have rolling date ranges: strictly increasing start dates,
      each period ends the day before the next starts, the last is open-ended
    - A ranch always has at least one price period (default_price_periods)

Design Decisions:
    - Pure functions over dicts: the service maps them onto ORM rows, tests
      exercise them without a database
"""

import copy
from datetime import date, datetime, timedelta, timezone

from calftrack.core.domain_types import LayoutMode


def _number_or_none(value: object) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _date_or_none(value: object) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _unique_breeds(values: object) -> list[str]:
    if not isinstance(values, list):
        return []
    unique: dict[str, str] = {}
    for item in values:
        text = str(item or "").strip()
        if text:
            unique.setdefault(text.lower(), text)
    return list(unique.values())


def _layout_mode(value: object) -> LayoutMode:
    return LayoutMode.WEIGHT if str(value or "").strip().lower() == "weight" else LayoutMode.SINGLE


def normalize_weight_brackets(items: list[dict] | None) -> list[dict]:
    return [
        {
            "bracket_key": str(item["key"]) if item.get("key") else None,
            "label": str(item.get("label") or f"Category {index + 1}"),
            "min_weight": _number_or_none(item.get("min")),
            "max_weight": _number_or_none(item.get("max")),
            "description": (
                None if item.get("description") is None else str(item["description"])
            ),
            "breeds": _unique_breeds(item.get("breeds")),
            "order_index": index,
        }
        for index, item in enumerate(items or [])
    ]


def apply_rolling_date_ranges(periods: list[dict]) -> list[dict]:
    """Force increasing start dates and derive end dates from the next start."""
    previous: date | None = None
    rolled = []
    for item in periods:
        start = item.get("start_date") or _today()
        if previous is not None and start <= previous:
            start = previous + timedelta(days=1)
        previous = start
        rolled.append({**item, "start_date": start})

    for index, item in enumerate(rolled):
        is_last = index == len(rolled) - 1
        item["end_date"] = None if is_last else rolled[index + 1]["start_date"] - timedelta(days=1)
    return rolled


def normalize_price_periods(items: list[dict] | None) -> list[dict]:
    periods = [
        {
            "period_key": str(item["key"]) if item.get("key") else None,
            "label": str(item.get("label") or f"Period {index + 1}"),
            "start_date": _date_or_none(item.get("start_date")),
            "end_date": _date_or_none(item.get("end_date")),
            "purchase_price": _number_or_none(item.get("purchase_price")),
            "sell_price": _number_or_none(item.get("sell_price")),
            "layout_mode": _layout_mode(item.get("layout_mode")).value,
            "sheet_data": copy.deepcopy(item.get("sheet_data"))
            if isinstance(item.get("sheet_data"), dict) else {},
            "order_index": index,
        }
        for index, item in enumerate(items or [])
    ]
    return apply_rolling_date_ranges(periods)


def default_price_periods(has_weight_brackets: bool) -> list[dict]:
    return [{
        "period_key": "period_1",
        "label": "Period 1",
        "start_date": _today(),
        "end_date": None,
        "purchase_price": None,
        "sell_price": None,
        "layout_mode": (LayoutMode.WEIGHT if has_weight_brackets else LayoutMode.SINGLE).value,
        "sheet_data": {},
        "order_index": 0,
    }]
