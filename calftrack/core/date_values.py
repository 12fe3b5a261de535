"""Date Values — normalise intake dates and compute days on feed.

Invariants:
    - normalize_date_field returns a timezone-aware UTC midnight or None
    - None / "" mean "no value"; anything else that does not parse raises
      FieldValidationError (never a silent None)
    - Spreadsheet day serials use the 1900 date system (openpyxl.from_excel)
    - days_on_feed counts the placement day itself (minimum 1) plus pre-days

Design Decisions:
    - Accept ISO strings, MM/DD/YYYY, date, datetime and numeric serials:
      the bulk-intake producer hands over whatever the sheet contained
    - bool is rejected explicitly (it is an int subclass)
"""

from datetime import date, datetime, time, timezone

from openpyxl.utils.datetime import from_excel

from calftrack.core.errors import FieldValidationError


_TEXT_FORMATS = ("%m/%d/%Y", "%Y-%m-%d")


def _utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _parse_text(raw: str) -> date | None:
    for fmt in _TEXT_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def _parse_serial(value: float) -> date | None:
    if value <= 0:
        return None
    try:
        converted = from_excel(value)
    except (ValueError, OverflowError):
        return None
    if isinstance(converted, datetime):
        return converted.date()
    if isinstance(converted, date):
        return converted
    return None


def normalize_date_field(value: object, field: str) -> datetime | None:
    """ISO string / MM/DD/YYYY / date / datetime / day serial → UTC midnight."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    day: date | None = None
    if isinstance(value, bool):
        day = None
    elif isinstance(value, datetime):
        aware = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        day = aware.astimezone(timezone.utc).date()
    elif isinstance(value, date):
        day = value
    elif isinstance(value, (int, float)):
        day = _parse_serial(float(value))
    elif isinstance(value, str):
        raw = value.strip()
        try:
            day = _parse_serial(float(raw))
        except ValueError:
            day = _parse_text(raw)

    if day is None:
        raise FieldValidationError(f"Invalid date for '{field}'", field, value)
    return _utc_midnight(day)


def as_utc_date(value: datetime | date | None) -> date | None:
    """Calendar day of a stored timestamp (naive values are treated as UTC)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def days_on_feed(
    placed: datetime | date | None,
    pre_days: int | None,
    until: datetime | date | None = None,
) -> int:
    """Elapsed feed days from placement through `until` (today by default)."""
    pre = max(0, int(pre_days or 0))
    start = as_utc_date(placed)
    if start is None:
        return pre
    end = as_utc_date(until) or datetime.now(timezone.utc).date()
    elapsed = (end - start).days + 1
    return max(elapsed, 1) + pre
