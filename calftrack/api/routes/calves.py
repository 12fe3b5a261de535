"""Calf Routes — intake (single and bulk), edits, ranch views, and timelines.

Invariants:
    - Routes never touch the session directly: CalfLedger owns every write
    - PATCH bodies are applied with exclude_unset, so an explicit null clears
      a field while an omitted field is left alone
"""

import logging

from fastapi import APIRouter, Depends, status

from calftrack.api.dependencies import caller_identity, get_calf_ledger, get_reporting
from calftrack.core.movement_events import event_to_dict
from calftrack.schemas.calf import (
    CalfBulkCreate,
    CalfCreate,
    CalfResponse,
    CalfUpdate,
    MovementEventResponse,
)
from calftrack.services.calf_ledger import CalfLedger
from calftrack.services.reporting import ReportingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/calves", tags=["calves"])


@router.post("", response_model=CalfResponse, status_code=status.HTTP_201_CREATED)
async def create_calf(
    body: CalfCreate,
    ledger: CalfLedger = Depends(get_calf_ledger),
    created_by: str | None = Depends(caller_identity),
):
    return await ledger.create(body.model_dump(exclude_unset=True), created_by)


@router.post(
    "/bulk", response_model=list[CalfResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_calves(
    body: CalfBulkCreate,
    ledger: CalfLedger = Depends(get_calf_ledger),
    created_by: str | None = Depends(caller_identity),
):
    """All-or-nothing spreadsheet intake; errors carry the failing record index."""
    records = [calf.model_dump(exclude_unset=True) for calf in body.calves]
    return await ledger.create_many(records, created_by)


@router.get("/by-ranch/{ranch_id}", response_model=list[CalfResponse])
async def list_calves_by_origin(
    ranch_id: int, ledger: CalfLedger = Depends(get_calf_ledger),
):
    """Every calf that entered the system at this ranch."""
    return await ledger.find_all_by_ranch(ranch_id)


@router.get("/by-ranch/{ranch_id}/inventory", response_model=list[CalfResponse])
async def list_inventory(
    ranch_id: int, ledger: CalfLedger = Depends(get_calf_ledger),
):
    """Calves currently on feed at this ranch."""
    return await ledger.find_inventory_by_ranch(ranch_id)


@router.get("/by-ranch/{ranch_id}/manage", response_model=list[CalfResponse])
async def list_managed(
    ranch_id: int, ledger: CalfLedger = Depends(get_calf_ledger),
):
    """Every calf currently at this ranch, any status, newest first."""
    return await ledger.find_manage_by_ranch(ranch_id)


@router.get("/{calf_id}", response_model=CalfResponse)
async def get_calf(calf_id: int, ledger: CalfLedger = Depends(get_calf_ledger)):
    return await ledger.find_one(calf_id)


@router.get("/{calf_id}/history", response_model=list[MovementEventResponse])
async def get_calf_history(
    calf_id: int, reporting: ReportingService = Depends(get_reporting),
):
    events = await reporting.get_movement_history(calf_id)
    return [event_to_dict(event) for event in events]


@router.patch("/{calf_id}", response_model=CalfResponse)
async def update_calf(
    calf_id: int,
    body: CalfUpdate,
    ledger: CalfLedger = Depends(get_calf_ledger),
):
    return await ledger.update(calf_id, body.model_dump(exclude_unset=True))


@router.delete("/{calf_id}")
async def delete_calf(calf_id: int, ledger: CalfLedger = Depends(get_calf_ledger)):
    return await ledger.delete(calf_id)
