"""Master Data Schemas — breed and seller payloads.

Invariants:
    - Names are required and non-blank; canonical casing is applied by NameRegistry
"""

from pydantic import BaseModel, ConfigDict, Field


class BreedCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    order_index: int | None = Field(None, ge=0)


class BreedUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    order_index: int | None = Field(None, ge=0)


class BreedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    order_index: int


class SellerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=140)
    address: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=120)
    state: str | None = Field(None, max_length=40)
    zip_code: str | None = Field(None, max_length=20)


class SellerUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=140)
    address: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=120)
    state: str | None = Field(None, max_length=40)
    zip_code: str | None = Field(None, max_length=20)


class SellerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str | None
    city: str | None
    state: str | None
    zip_code: str | None
