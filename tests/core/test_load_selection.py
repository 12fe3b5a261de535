"""Load Selection — selector normalisation, destinations and derived status.

Tests:
    - Identifiers are stripped, de-duplicated and string-coerced
    - A destination needs a ranch id or a name
    - Load status precedence: canceled > draft > arrived > in transit
    - Arrival status edit permission by acting ranch
"""

from datetime import datetime, timezone

import pytest

from calftrack.core.domain_types import LoadStatus
from calftrack.core.errors import FieldValidationError
from calftrack.core.load_selection import (
    LoadSelector,
    can_edit_arrival_status,
    derive_load_status,
    normalize_identifier_list,
    resolve_destination,
)


def test_identifier_list_strips_dedupes_and_coerces():
    assert normalize_identifier_list([" 840A ", "840A", 982000123.0, None, "", 7]) == (
        "840A", "982000123", "7",
    )


def test_selector_empty_when_nothing_selected():
    assert LoadSelector.build([], None).is_empty
    assert not LoadSelector.build(None, ["12"]).is_empty


def test_resolve_destination_requires_one_side():
    with pytest.raises(FieldValidationError):
        resolve_destination(None, "   ")


def test_resolve_destination_trims_name():
    assert resolve_destination(None, "  Sale Barn ") == (None, "Sale Barn")
    assert resolve_destination(4, None) == (4, None)


def test_load_status_canceled_wins():
    arrived = datetime(2024, 5, 2, tzinfo=timezone.utc)
    assert derive_load_status("CANCELLED by buyer", 10, arrived) == LoadStatus.CANCELED


def test_load_status_draft_without_calves():
    assert derive_load_status(None, 0, None) == LoadStatus.DRAFT


def test_load_status_arrived_and_in_transit():
    arrived = datetime(2024, 5, 2, tzinfo=timezone.utc)
    assert derive_load_status("Truck 3", 4, arrived) == LoadStatus.ARRIVED
    assert derive_load_status("Truck 3", 4, None) == LoadStatus.IN_TRANSIT


def test_arrival_edit_by_origin_or_destination():
    assert can_edit_arrival_status(1, origin_ranch_id=1, destination_ranch_id=2)
    assert can_edit_arrival_status(2, origin_ranch_id=1, destination_ranch_id=2)
    assert not can_edit_arrival_status(3, origin_ranch_id=1, destination_ranch_id=2)


def test_arrival_edit_free_text_destination_is_origin_only():
    assert can_edit_arrival_status(1, origin_ranch_id=1, destination_ranch_id=None)
    assert not can_edit_arrival_status(2, origin_ranch_id=1, destination_ranch_id=None)
