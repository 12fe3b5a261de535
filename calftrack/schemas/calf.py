"""Calf Schemas — intake records, patches and ledger projections.

Invariants:
    - Date inputs stay raw (ISO text, MM/DD/YYYY or spreadsheet serial);
      CalfLedger normalises them so bulk intake and the API share one parser
    - Identifiers accept numbers (spreadsheet EIDs) and are string-coerced later
    - CalfResponse.days_on_feed is computed, never stored

Design Decisions:
    - Status/sex stay plain strings here: aliases ("dead", "shipped out") are
      resolved by core/calf_lifecycle.py with field-level errors
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from calftrack.core.date_values import days_on_feed

DateInput = str | int | float | None
Identifier = str | int | float


class CalfCreate(BaseModel):
    primary_id: Identifier
    eid: Identifier | None = None
    original_id: Identifier | None = None
    placed_date: DateInput = None
    breed: str = Field(min_length=1, max_length=120)
    sex: str
    price: float | None = None
    sell_price: float | None = None
    weight: float | None = None
    seller: str = Field(min_length=1, max_length=140)
    dairy: str | None = None
    current_ranch_id: int
    origin_ranch_id: int | None = None
    status: str | None = None
    sell_status: str | None = None
    condition: str | None = None
    calf_type: str | int | None = None
    pre_days_on_feed: int | None = Field(None, ge=0)
    death_date: DateInput = None
    shipped_out_date: DateInput = None
    shipped_to: str | None = None


class CalfBulkCreate(BaseModel):
    calves: list[CalfCreate] = Field(min_length=1, max_length=5000)


class CalfUpdate(BaseModel):
    primary_id: Identifier | None = None
    eid: Identifier | None = None
    original_id: Identifier | None = None
    placed_date: DateInput = None
    breed: str | None = None
    sex: str | None = None
    price: float | None = None
    sell_price: float | None = None
    weight: float | None = None
    seller: str | None = None
    dairy: str | None = None
    current_ranch_id: int | None = None
    origin_ranch_id: int | None = None
    status: str | None = None
    sell_status: str | None = None
    condition: str | None = None
    calf_type: str | int | None = None
    pre_days_on_feed: int | None = Field(None, ge=0)
    death_date: DateInput = None
    shipped_out_date: DateInput = None
    shipped_to: str | None = None


class CalfResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    primary_id: str
    eid: str | None
    original_id: str | None
    placed_date: datetime | None
    breed: str
    sex: str
    price: float | None
    sell_price: float | None
    weight: float | None
    seller: str
    dairy: str | None
    current_ranch_id: int | None
    origin_ranch_id: int | None
    status: str
    sell_status: str
    condition: str | None
    calf_type: str | None
    pre_days_on_feed: int | None
    death_date: datetime | None
    shipped_out_date: datetime | None
    shipped_to: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime
    days_on_feed: int = 0

    @model_validator(mode="after")
    def compute_days_on_feed(self) -> "CalfResponse":
        self.days_on_feed = days_on_feed(
            self.placed_date, self.pre_days_on_feed,
            until=self.shipped_out_date or self.death_date,
        )
        return self


class MovementEventResponse(BaseModel):
    id: int | None
    calf_id: int
    movement_type: str
    event_date: str | None
    load_id: int | None
    from_ranch_id: int | None
    to_ranch_id: int | None
    from_status: str | None
    to_status: str | None
    notes: str | None
