"""Load Routes — create/transfer, amend, arrival status, and delete-with-restore.

Invariants:
    - POST /loads is the only way a calf goes feeding → shipped in bulk; it
      always answers with the shipped ids AND the identifiers left behind
    - Deleting a load restores its calves (TransferEngine.delete_load)
"""

import logging

from fastapi import APIRouter, Depends, status

from calftrack.api.dependencies import caller_identity, get_reporting, get_transfer_engine
from calftrack.core.load_selection import LoadSelector
from calftrack.schemas.load import (
    ArrivalStatusUpdate,
    CalfLoadResponse,
    LoadCreate,
    LoadCreateResponse,
    LoadDeleteResponse,
    LoadDetailResponse,
    LoadResponse,
    LoadUpdate,
)
from calftrack.services.reporting import ReportingService
from calftrack.services.transfer_engine import TransferEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/loads", tags=["loads"])


@router.post("", response_model=LoadCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_load(
    body: LoadCreate,
    engine: TransferEngine = Depends(get_transfer_engine),
    created_by: str | None = Depends(caller_identity),
):
    result = await engine.create_load(
        origin_ranch_id=body.origin_ranch_id,
        destination_ranch_id=body.destination_ranch_id,
        destination_name=body.destination_name,
        departure_date=body.departure_date,
        arrival_date=body.arrival_date,
        notes=body.notes,
        trucking=body.trucking,
        created_by=created_by,
        selector=LoadSelector.build(body.eids, body.primary_ids, body.calf_ids),
    )
    return LoadCreateResponse(
        load=LoadResponse.model_validate(result.load),
        head_count=result.head_count,
        shipped_calf_ids=result.shipped_calf_ids,
        excluded_identifiers=result.excluded_identifiers,
    )


@router.get("/{load_id}", response_model=LoadDetailResponse)
async def get_load(load_id: int, reporting: ReportingService = Depends(get_reporting)):
    return await reporting.find_load(load_id)


@router.patch("/{load_id}", response_model=LoadResponse)
async def update_load(
    load_id: int,
    body: LoadUpdate,
    engine: TransferEngine = Depends(get_transfer_engine),
):
    return await engine.update_load(load_id, body.model_dump(exclude_unset=True))


@router.patch(
    "/{load_id}/calves/{calf_id}/arrival-status",
    response_model=CalfLoadResponse,
)
async def update_arrival_status(
    load_id: int,
    calf_id: int,
    body: ArrivalStatusUpdate,
    engine: TransferEngine = Depends(get_transfer_engine),
):
    return await engine.update_load_calf_arrival_status(
        load_id, calf_id, body.acting_ranch_id, body.arrival_status,
    )


@router.delete("/{load_id}", response_model=LoadDeleteResponse)
async def delete_load(
    load_id: int, engine: TransferEngine = Depends(get_transfer_engine),
):
    return await engine.delete_load(load_id)
