"""Reporting — read-only projections: calf timelines, load views, ranch summaries.

Invariants:
    - Never mutates: no add/flush/commit in this module
    - get_movement_history rebuilds typed events from history rows alone
      (ordered by event_date, then id); it never reads the calf's current state
    - Load status is derived on read (core/load_selection.derive_load_status)

Design Decisions:
    - Aggregates computed with GROUP BY queries, one per metric, then merged in
      Python: each query stays index-friendly and trivially portable
    - Projections are plain dicts shaped for the API schemas
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from calftrack.core.domain_types import CalfStatus, LoadStatus
from calftrack.core.errors import ResourceNotFoundError
from calftrack.core.load_selection import derive_load_status
from calftrack.core.movement_events import MovementEvent, event_from_row
from calftrack.models.calf import Calf
from calftrack.models.calf_load import CalfLoad
from calftrack.models.calf_movement import CalfMovementHistory
from calftrack.models.load import Load
from calftrack.models.ranch import Ranch

logger = logging.getLogger(__name__)


def _aware(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _load_fields(load: Load) -> dict:
    return {
        "id": load.id,
        "origin_ranch_id": load.origin_ranch_id,
        "destination_ranch_id": load.destination_ranch_id,
        "destination_name": load.destination_name,
        "departure_date": _aware(load.departure_date),
        "arrival_date": _aware(load.arrival_date),
        "notes": load.notes,
        "after_arrival_notes": load.after_arrival_notes,
        "trucking": load.trucking,
        "created_by": load.created_by,
        "created_at": _aware(load.created_at),
        "updated_at": _aware(load.updated_at),
    }


def _load_status(load: Load, head_count: int) -> LoadStatus:
    return derive_load_status(load.notes, head_count, load.arrival_date)


class ReportingService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _ranch_names(self) -> dict[int, str]:
        rows = await self.db.execute(select(Ranch.id, Ranch.name))
        return {ranch_id: name for ranch_id, name in rows.all()}

    async def _head_counts(self, load_ids: list[int]) -> dict[int, int]:
        if not load_ids:
            return {}
        rows = await self.db.execute(
            select(CalfLoad.load_id, func.count(CalfLoad.id))
            .where(CalfLoad.load_id.in_(load_ids))
            .group_by(CalfLoad.load_id),
        )
        return {load_id: count for load_id, count in rows.all()}

    # ─── Calf timeline ───────────────────────────────────────────

    async def get_movement_history(self, calf_id: int) -> list[MovementEvent]:
        exists = await self.db.execute(select(Calf.id).where(Calf.id == calf_id))
        if exists.first() is None:
            raise ResourceNotFoundError("Calf", calf_id)
        rows = await self.db.execute(
            select(CalfMovementHistory)
            .where(CalfMovementHistory.calf_id == calf_id)
            .order_by(CalfMovementHistory.event_date, CalfMovementHistory.id),
        )
        return [event_from_row(row) for row in rows.scalars().all()]

    # ─── Loads ───────────────────────────────────────────────────

    async def find_load(self, load_id: int) -> dict:
        load = await self.db.get(Load, load_id, populate_existing=True)
        if load is None:
            raise ResourceNotFoundError("Load", load_id)

        rows = (await self.db.execute(
            select(CalfLoad, Calf)
            .join(Calf, Calf.id == CalfLoad.calf_id)
            .where(CalfLoad.load_id == load.id)
            .order_by(CalfLoad.id),
        )).all()
        names = await self._ranch_names()

        return {
            **_load_fields(load),
            "status": _load_status(load, len(rows)).value,
            "head_count": len(rows),
            "origin_ranch_name": names.get(load.origin_ranch_id),
            "destination_label": (
                names.get(load.destination_ranch_id) or load.destination_name
            ),
            "calves": [
                {
                    "calf_id": calf.id,
                    "primary_id": calf.primary_id,
                    "eid": calf.eid,
                    "original_id": calf.original_id,
                    "breed": calf.breed,
                    "sex": calf.sex,
                    "seller": calf.seller,
                    "status": calf.status,
                    "placed_date": _aware(calf.placed_date),
                    "price": calf.price,
                    "sell_price": calf.sell_price,
                    "current_ranch_id": calf.current_ranch_id,
                    "origin_ranch_id": calf.origin_ranch_id,
                    "days_on_feed_at_shipment": link.days_on_feed_at_shipment,
                    "arrival_status": link.arrival_status,
                }
                for link, calf in rows
            ],
        }

    async def find_loads_by_ranch(self, ranch_id: int) -> list[dict]:
        """Loads sent or received by a ranch, newest departure first."""
        if await self.db.get(Ranch, ranch_id) is None:
            raise ResourceNotFoundError("Ranch", ranch_id)
        loads = (await self.db.execute(
            select(Load)
            .where(or_(
                Load.origin_ranch_id == ranch_id,
                Load.destination_ranch_id == ranch_id,
            ))
            .order_by(Load.departure_date.desc(), Load.id.desc()),
        )).scalars().all()
        counts = await self._head_counts([load.id for load in loads])
        names = await self._ranch_names()

        views = []
        for load in loads:
            received = (
                load.destination_ranch_id == ranch_id
                and load.origin_ranch_id != ranch_id
            )
            counterpart = (
                names.get(load.origin_ranch_id) if received
                else names.get(load.destination_ranch_id) or load.destination_name
            )
            head_count = counts.get(load.id, 0)
            views.append({
                **_load_fields(load),
                "status": _load_status(load, head_count).value,
                "head_count": head_count,
                "direction": "received" if received else "sent",
                "counterpart_name": counterpart,
            })
        return views

    # ─── Ranch dashboard ─────────────────────────────────────────

    async def ranch_summaries(self) -> list[dict]:
        ranches = (await self.db.execute(
            select(Ranch).order_by(Ranch.name, Ranch.id),
        )).scalars().all()

        cattle = dict((await self.db.execute(
            select(Calf.current_ranch_id, func.count(Calf.id))
            .where(Calf.status == CalfStatus.FEEDING.value)
            .group_by(Calf.current_ranch_id),
        )).all())
        active_loads = dict((await self.db.execute(
            select(Load.origin_ranch_id, func.count(Load.id))
            .where(Load.arrival_date.is_(None))
            .group_by(Load.origin_ranch_id),
        )).all())

        last_activity: dict[int, datetime] = {}
        for query in (
            select(Calf.current_ranch_id, func.max(Calf.placed_date))
            .group_by(Calf.current_ranch_id),
            select(CalfMovementHistory.to_ranch_id, func.max(CalfMovementHistory.event_date))
            .group_by(CalfMovementHistory.to_ranch_id),
            select(CalfMovementHistory.from_ranch_id, func.max(CalfMovementHistory.event_date))
            .group_by(CalfMovementHistory.from_ranch_id),
        ):
            for ranch_id, latest in (await self.db.execute(query)).all():
                latest = _aware(latest)
                if ranch_id is None or latest is None:
                    continue
                if ranch_id not in last_activity or latest > last_activity[ranch_id]:
                    last_activity[ranch_id] = latest

        summaries = []
        for ranch in ranches:
            total = cattle.get(ranch.id, 0)
            summaries.append({
                "id": ranch.id,
                "name": ranch.name,
                "city": ranch.city,
                "state": ranch.state,
                "manager": ranch.manager,
                "color": ranch.color,
                "total_cattle": total,
                "active_loads": active_loads.get(ranch.id, 0),
                "last_activity": last_activity.get(ranch.id),
                "status": "Active" if total > 0 else "Inactive",
            })
        return summaries
