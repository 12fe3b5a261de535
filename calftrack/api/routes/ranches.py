"""Ranch Routes — ranch CRUD, dashboard summaries, and per-ranch load lists."""

import logging

from fastapi import APIRouter, Depends, status

from calftrack.api.dependencies import (
    caller_identity,
    get_ranch_service,
    get_reporting,
)
from calftrack.schemas.load import RanchLoadResponse
from calftrack.schemas.ranch import (
    RanchCreate,
    RanchResponse,
    RanchSummaryResponse,
    RanchUpdate,
)
from calftrack.services.ranch_service import RanchService
from calftrack.services.reporting import ReportingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ranches", tags=["ranches"])


@router.post("", response_model=RanchResponse, status_code=status.HTTP_201_CREATED)
async def create_ranch(
    body: RanchCreate,
    service: RanchService = Depends(get_ranch_service),
    created_by: str | None = Depends(caller_identity),
):
    return await service.create(body.model_dump(exclude_unset=True), created_by)


@router.get("", response_model=list[RanchResponse])
async def list_ranches(service: RanchService = Depends(get_ranch_service)):
    return await service.find_all()


@router.get("/summaries", response_model=list[RanchSummaryResponse])
async def ranch_summaries(reporting: ReportingService = Depends(get_reporting)):
    """Dashboard cards: head count on feed, open loads, last activity."""
    return await reporting.ranch_summaries()


@router.get("/{ranch_id}", response_model=RanchResponse)
async def get_ranch(ranch_id: int, service: RanchService = Depends(get_ranch_service)):
    return await service.find_one(ranch_id)


@router.get("/{ranch_id}/loads", response_model=list[RanchLoadResponse])
async def list_ranch_loads(
    ranch_id: int, reporting: ReportingService = Depends(get_reporting),
):
    return await reporting.find_loads_by_ranch(ranch_id)


@router.patch("/{ranch_id}", response_model=RanchResponse)
async def update_ranch(
    ranch_id: int,
    body: RanchUpdate,
    service: RanchService = Depends(get_ranch_service),
):
    return await service.update(ranch_id, body.model_dump(exclude_unset=True))


@router.delete("/{ranch_id}")
async def delete_ranch(
    ranch_id: int, service: RanchService = Depends(get_ranch_service),
):
    return await service.delete(ranch_id)
