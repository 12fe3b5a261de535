"""Load Schemas — shipment requests, amendments and load projections.

Invariants:
    - LoadCreate needs destination_ranch_id or destination_name (checked by
      the engine so API and internal callers get the same field error)
    - eids / primary_ids / calf_ids may be empty: a load with zero calves is valid
    - LoadUpdate selector fields are only applied when sent (exclude_unset);
      sending them re-picks the load's calves
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from calftrack.schemas.calf import DateInput, Identifier


class LoadCreate(BaseModel):
    origin_ranch_id: int
    destination_ranch_id: int | None = None
    destination_name: str | None = Field(None, max_length=200)
    departure_date: DateInput
    arrival_date: DateInput = None
    notes: str | None = None
    trucking: str | None = Field(None, max_length=200)
    eids: list[Identifier] = Field(default_factory=list)
    primary_ids: list[Identifier] = Field(default_factory=list)
    calf_ids: list[int] = Field(default_factory=list)


class LoadUpdate(BaseModel):
    destination_ranch_id: int | None = None
    destination_name: str | None = Field(None, max_length=200)
    departure_date: DateInput = None
    arrival_date: DateInput = None
    notes: str | None = None
    after_arrival_notes: str | None = None
    trucking: str | None = Field(None, max_length=200)
    eids: list[Identifier] | None = None
    primary_ids: list[Identifier] | None = None
    calf_ids: list[int] | None = None


class ArrivalStatusUpdate(BaseModel):
    acting_ranch_id: int
    arrival_status: str | None = None


class LoadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    origin_ranch_id: int | None
    destination_ranch_id: int | None
    destination_name: str | None
    departure_date: datetime
    arrival_date: datetime | None
    notes: str | None
    after_arrival_notes: str | None
    trucking: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime


class LoadCreateResponse(BaseModel):
    load: LoadResponse
    head_count: int
    shipped_calf_ids: list[int]
    excluded_identifiers: list[str]


class LoadCalfResponse(BaseModel):
    calf_id: int
    primary_id: str
    eid: str | None
    original_id: str | None
    breed: str
    sex: str
    seller: str
    status: str
    placed_date: datetime | None
    price: float | None
    sell_price: float | None
    current_ranch_id: int | None
    origin_ranch_id: int | None
    days_on_feed_at_shipment: int | None
    arrival_status: str | None


class LoadDetailResponse(LoadResponse):
    status: str
    head_count: int
    origin_ranch_name: str | None
    destination_label: str | None
    calves: list[LoadCalfResponse]


class RanchLoadResponse(LoadResponse):
    status: str
    head_count: int
    direction: str
    counterpart_name: str | None


class CalfLoadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    load_id: int
    calf_id: int
    days_on_feed_at_shipment: int | None
    arrival_status: str | None


class LoadDeleteResponse(BaseModel):
    id: int
    restored_calf_ids: list[int]
