"""Ranch Schemas — ranch CRUD payloads, layouts and dashboard summaries.

Invariants:
    - RanchCreate.name: 1-120 chars, stripped, non-empty
    - Layout items keep the short input keys (key/min/max) used by the
      price-sheet editor; responses use the stored column names
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WeightBracketInput(BaseModel):
    key: str | None = None
    label: str | None = None
    min: float | None = None
    max: float | None = None
    description: str | None = None
    breeds: list[str] = Field(default_factory=list)


class PricePeriodInput(BaseModel):
    key: str | None = None
    label: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    purchase_price: float | None = None
    sell_price: float | None = None
    layout_mode: str | None = None
    sheet_data: dict | None = None


class RanchCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    address: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=120)
    state: str | None = Field(None, max_length=40)
    zip_code: str | None = Field(None, max_length=20)
    manager: str | None = Field(None, max_length=120)
    color: str | None = Field(None, max_length=20)
    weight_brackets: list[WeightBracketInput] | None = None
    price_periods: list[PricePeriodInput] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class RanchUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    address: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=120)
    state: str | None = Field(None, max_length=40)
    zip_code: str | None = Field(None, max_length=20)
    manager: str | None = Field(None, max_length=120)
    color: str | None = Field(None, max_length=20)
    weight_brackets: list[WeightBracketInput] | None = None
    price_periods: list[PricePeriodInput] | None = None


class WeightBracketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bracket_key: str | None
    label: str
    min_weight: float | None
    max_weight: float | None
    description: str | None
    breeds: list[str]
    order_index: int


class PricePeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    period_key: str | None
    label: str
    start_date: date | None
    end_date: date | None
    purchase_price: float | None
    sell_price: float | None
    layout_mode: str
    sheet_data: dict
    order_index: int


class RanchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str | None
    city: str | None
    state: str | None
    zip_code: str | None
    manager: str | None
    color: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime
    weight_brackets: list[WeightBracketResponse]
    price_periods: list[PricePeriodResponse]


class RanchSummaryResponse(BaseModel):
    id: int
    name: str
    city: str | None
    state: str | None
    manager: str | None
    color: str | None
    total_cattle: int
    active_loads: int
    last_activity: datetime | None
    status: str
