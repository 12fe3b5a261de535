"""Master Data Routes — breed and seller registries.

Design Decisions:
    - Two routers over one generic NameRegistry; the schemas differ, the
      handlers do not
"""

from fastapi import APIRouter, Depends, status

from calftrack.api.dependencies import get_breed_registry, get_seller_registry
from calftrack.schemas.registry import (
    BreedCreate,
    BreedResponse,
    BreedUpdate,
    SellerCreate,
    SellerResponse,
    SellerUpdate,
)
from calftrack.services.name_registry import NameRegistry

breeds_router = APIRouter(prefix="/api/v1/breeds", tags=["breeds"])
sellers_router = APIRouter(prefix="/api/v1/sellers", tags=["sellers"])


# ─── Breeds ─────────────────────────────────────────────────────

@breeds_router.post("", response_model=BreedResponse, status_code=status.HTTP_201_CREATED)
async def create_breed(
    body: BreedCreate, registry: NameRegistry = Depends(get_breed_registry),
):
    return await registry.create(body.model_dump(exclude_unset=True))


@breeds_router.get("", response_model=list[BreedResponse])
async def list_breeds(registry: NameRegistry = Depends(get_breed_registry)):
    return await registry.find_all()


@breeds_router.get("/{breed_id}", response_model=BreedResponse)
async def get_breed(breed_id: int, registry: NameRegistry = Depends(get_breed_registry)):
    return await registry.find_one(breed_id)


@breeds_router.patch("/{breed_id}", response_model=BreedResponse)
async def update_breed(
    breed_id: int, body: BreedUpdate,
    registry: NameRegistry = Depends(get_breed_registry),
):
    return await registry.update(breed_id, body.model_dump(exclude_unset=True))


@breeds_router.delete("/{breed_id}")
async def delete_breed(breed_id: int, registry: NameRegistry = Depends(get_breed_registry)):
    return await registry.delete(breed_id)


# ─── Sellers ────────────────────────────────────────────────────

@sellers_router.post("", response_model=SellerResponse, status_code=status.HTTP_201_CREATED)
async def create_seller(
    body: SellerCreate, registry: NameRegistry = Depends(get_seller_registry),
):
    return await registry.create(body.model_dump(exclude_unset=True))


@sellers_router.get("", response_model=list[SellerResponse])
async def list_sellers(registry: NameRegistry = Depends(get_seller_registry)):
    return await registry.find_all()


@sellers_router.get("/{seller_id}", response_model=SellerResponse)
async def get_seller(seller_id: int, registry: NameRegistry = Depends(get_seller_registry)):
    return await registry.find_one(seller_id)


@sellers_router.patch("/{seller_id}", response_model=SellerResponse)
async def update_seller(
    seller_id: int, body: SellerUpdate,
    registry: NameRegistry = Depends(get_seller_registry),
):
    return await registry.update(seller_id, body.model_dump(exclude_unset=True))


@sellers_router.delete("/{seller_id}")
async def delete_seller(
    seller_id: int, registry: NameRegistry = Depends(get_seller_registry),
):
    return await registry.delete(seller_id)
