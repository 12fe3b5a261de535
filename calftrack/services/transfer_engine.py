"""Transfer Engine — loads: atomic relocation of calves between ranches.

Invariants:
    - create_load is ONE unit of work: load row, calf claims, CalfLoad links and
      LOAD_TRANSFER history rows all commit together or not at all
    - Only FEEDING calves currently at the origin ranch ship; missing,
      non-feeding or off-origin calves in the selector are silently excluded
      (reported back, never raised)
    - A calf is claimed by a guarded UPDATE ... WHERE status = 'feeding' AND
      current_ranch_id = origin; zero rows affected means a concurrent transfer
      won it, so it is excluded. At most one transfer ships a given calf
    - An empty selector produces a load with zero calves (valid success)
    - Arrival status is paperwork on the link; it never changes the calf
    - delete_load restores every calf to the state its LOAD_TRANSFER row recorded
    - update_load with a selector re-picks the membership: dropped calves are
      restored like delete_load does, new ones go through the same guarded claim

Design Decisions:
    - Candidates are also selected FOR UPDATE where the backend supports row locks
    - Claims, links and history are written with explicit statements (no ORM
      relationship cascades): every write of the unit of work is visible here
    - Free-text destinations keep the calf's current ranch (no ranch to move to)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from calftrack.core.calf_lifecycle import derive_sell_status, parse_arrival_status
from calftrack.core.date_values import days_on_feed, normalize_date_field
from calftrack.core.domain_types import CalfStatus, MovementType
from calftrack.core.errors import (
    BusinessRuleError,
    FieldValidationError,
    ForbiddenActionError,
    ReferentialIntegrityError,
    ResourceNotFoundError,
)
from calftrack.core.load_selection import (
    LoadSelector,
    can_edit_arrival_status,
    resolve_destination,
)
from calftrack.core.movement_events import LoadTransfer, StatusChange, to_row
from calftrack.models.calf import Calf
from calftrack.models.calf_load import CalfLoad
from calftrack.models.calf_movement import CalfMovementHistory
from calftrack.models.load import Load
from calftrack.models.ranch import Ranch
from calftrack.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

LOAD_TEXT_FIELDS = ("notes", "after_arrival_notes", "trucking")
SELECTOR_FIELDS = ("eids", "primary_ids", "calf_ids")


@dataclass(frozen=True)
class Candidate:
    """Snapshot of a calf taken when it was selected for a load."""
    id: int
    primary_id: str
    eid: str | None
    current_ranch_id: int | None
    placed_date: datetime | None
    pre_days_on_feed: int | None


@dataclass
class TransferResult:
    load: Load
    shipped_calf_ids: list[int] = field(default_factory=list)
    excluded_identifiers: list[str] = field(default_factory=list)

    @property
    def head_count(self) -> int:
        return len(self.shipped_calf_ids)


def _text(value: object) -> str | None:
    text = str(value).strip() if value is not None else ""
    return text or None


def _excluded(selector: LoadSelector, shipped: list[Candidate]) -> list[str]:
    eids = {c.eid for c in shipped if c.eid}
    primary_ids = {c.primary_id for c in shipped}
    calf_ids = {c.id for c in shipped}
    return (
        [eid for eid in selector.eids if eid not in eids]
        + [pid for pid in selector.primary_ids if pid not in primary_ids]
        + [str(cid) for cid in selector.calf_ids if cid not in calf_ids]
    )


def _selector_match(selector: LoadSelector):
    """OR of the selector's identifier lists as one SQL criterion."""
    matches = []
    if selector.eids:
        matches.append(Calf.eid.in_(selector.eids))
    if selector.primary_ids:
        matches.append(Calf.primary_id.in_(selector.primary_ids))
    if selector.calf_ids:
        matches.append(Calf.id.in_(selector.calf_ids))
    return or_(*matches)


class TransferEngine:
    """Load lifecycle: create, amend, annotate arrivals, delete with restore."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Validation helpers ──────────────────────────────────────

    async def _ranch(self, ranch_id: int, role: str) -> Ranch:
        ranch = await self.db.get(Ranch, ranch_id)
        if ranch is None:
            raise ReferentialIntegrityError(f"{role} ranch {ranch_id} does not exist")
        return ranch

    async def _destination(
        self, destination_ranch_id: int | None, destination_name: str | None,
    ) -> tuple[int | None, str]:
        """(ranch id, label): the label is the ranch name when a ranch is given."""
        ranch_id, name = resolve_destination(destination_ranch_id, destination_name)
        if ranch_id is None:
            return None, name
        ranch = await self._ranch(ranch_id, "Destination")
        return ranch.id, ranch.name

    async def _load(self, load_id: int) -> Load:
        load = await self.db.get(Load, load_id, populate_existing=True)
        if load is None:
            raise ResourceNotFoundError("Load", load_id)
        return load

    # ─── create_load ─────────────────────────────────────────────

    async def create_load(
        self,
        *,
        origin_ranch_id: int,
        departure_date: object,
        destination_ranch_id: int | None = None,
        destination_name: str | None = None,
        arrival_date: object = None,
        notes: str | None = None,
        trucking: str | None = None,
        created_by: str | None = None,
        selector: LoadSelector | None = None,
    ) -> TransferResult:
        selector = selector or LoadSelector()
        async with unit_of_work(self.db, "create_load", ranch_id=origin_ranch_id):
            departure = normalize_date_field(departure_date, "departure_date")
            if departure is None:
                raise FieldValidationError(
                    "Departure date is required", "departure_date", departure_date,
                )
            arrival = normalize_date_field(arrival_date, "arrival_date")
            origin = await self._ranch(origin_ranch_id, "Origin")
            dest_id, dest_label = await self._destination(
                destination_ranch_id, destination_name,
            )

            load = Load(
                origin_ranch_id=origin.id,
                destination_ranch_id=dest_id,
                destination_name=dest_label,
                departure_date=departure,
                arrival_date=arrival,
                notes=_text(notes),
                trucking=_text(trucking),
                created_by=created_by,
            )
            self.db.add(load)
            await self.db.flush()
            result = TransferResult(load=load)

            if not selector.is_empty:
                candidates = await self._resolve_candidates(selector, origin.id)
                shipped = await self._claim(
                    candidates, origin.id, dest_id, dest_label, departure,
                )
                await self._link(load, shipped, departure)
                await self._record_history(load, shipped, origin.id, dest_id, departure)
                result.shipped_calf_ids = [c.id for c in shipped]
                result.excluded_identifiers = _excluded(selector, shipped)

        logger.info(
            f"Load {load.id} created: {result.head_count} shipped, "
            f"{len(result.excluded_identifiers)} excluded",
            extra={
                "load_id": load.id, "ranch_id": origin_ranch_id,
                "head_count": result.head_count,
                "excluded_count": len(result.excluded_identifiers),
            },
        )
        return result

    async def _resolve_candidates(
        self, selector: LoadSelector, origin_ranch_id: int | None,
    ) -> list[Candidate]:
        """FEEDING calves at the origin ranch matching any selected identifier."""
        rows = await self.db.execute(
            select(
                Calf.id, Calf.primary_id, Calf.eid, Calf.current_ranch_id,
                Calf.placed_date, Calf.pre_days_on_feed,
            )
            .where(
                Calf.status == CalfStatus.FEEDING.value,
                Calf.current_ranch_id == origin_ranch_id,
                _selector_match(selector),
            )
            .order_by(Calf.id)
            .with_for_update(),
        )
        return [Candidate(*row) for row in rows.all()]

    async def _claim(
        self,
        candidates: list[Candidate],
        origin_ranch_id: int | None,
        dest_id: int | None,
        dest_label: str,
        departure: datetime,
    ) -> list[Candidate]:
        values = {
            "status": CalfStatus.SHIPPED.value,
            "shipped_out_date": departure,
            "shipped_to": dest_label,
        }
        if dest_id is not None:
            values["current_ranch_id"] = dest_id

        claimed = []
        for candidate in candidates:
            outcome = await self.db.execute(
                update(Calf)
                .where(
                    Calf.id == candidate.id,
                    Calf.status == CalfStatus.FEEDING.value,
                    Calf.current_ranch_id == origin_ranch_id,
                )
                .values(**values)
                .execution_options(synchronize_session=False),
            )
            if outcome.rowcount == 1:
                claimed.append(candidate)
            else:
                logger.info(
                    f"Calf {candidate.id} already claimed by another transfer",
                    extra={"calf_id": candidate.id},
                )
        return claimed

    async def _link(
        self, load: Load, shipped: list[Candidate], departure: datetime,
    ) -> None:
        if not shipped:
            return
        await self.db.execute(insert(CalfLoad), [
            {
                "load_id": load.id,
                "calf_id": calf.id,
                "days_on_feed_at_shipment": days_on_feed(
                    calf.placed_date, calf.pre_days_on_feed, until=departure,
                ),
                "arrival_status": None,
            }
            for calf in shipped
        ])

    async def _record_history(
        self,
        load: Load,
        shipped: list[Candidate],
        origin_ranch_id: int | None,
        dest_id: int | None,
        departure: datetime,
        notes: str | None = None,
    ) -> None:
        if not shipped:
            return
        notes = notes or load.notes or f"Transferred by load #{load.id}"
        await self.db.execute(insert(CalfMovementHistory), [
            to_row(LoadTransfer(
                calf_id=calf.id,
                load_id=load.id,
                event_date=departure,
                from_ranch_id=origin_ranch_id,
                to_ranch_id=dest_id,
                notes=notes,
            ))
            for calf in shipped
        ])

    # ─── update_load ─────────────────────────────────────────────

    async def update_load(self, load_id: int, patch: dict) -> Load:
        """Amend load metadata and destination; re-pick its calves when the
        patch carries any of eids / primary_ids / calf_ids.

        Calves still matched stay on the load; dropped calves are restored to
        where the load found them; newly matched FEEDING calves at the origin
        are claimed exactly as create_load claims them.
        """
        async with unit_of_work(self.db, "update_load", load_id=load_id):
            load = await self._load(load_id)
            shipped_as = (load.departure_date, load.destination_ranch_id, load.destination_name)

            if "destination_ranch_id" in patch or "destination_name" in patch:
                dest_id, dest_label = await self._destination(
                    patch.get("destination_ranch_id", load.destination_ranch_id),
                    patch.get("destination_name", load.destination_name),
                )
                load.destination_ranch_id = dest_id
                load.destination_name = dest_label

            if "departure_date" in patch:
                departure = normalize_date_field(patch["departure_date"], "departure_date")
                if departure is None:
                    raise FieldValidationError(
                        "Departure date is required", "departure_date", None,
                    )
                load.departure_date = departure
            if "arrival_date" in patch:
                load.arrival_date = normalize_date_field(patch["arrival_date"], "arrival_date")
            for name in LOAD_TEXT_FIELDS:
                if name in patch:
                    setattr(load, name, _text(patch[name]))
            await self.db.flush()

            members = await self._member_ids(load.id)
            if any(name in patch for name in SELECTOR_FIELDS):
                selector = LoadSelector.build(*(patch.get(name) for name in SELECTOR_FIELDS))
                members = await self._repick_members(load, selector, members)

            moved = shipped_as != (
                load.departure_date, load.destination_ranch_id, load.destination_name,
            )
            if members and moved:
                await self._refresh_members(load, members)
        return load

    async def _member_ids(self, load_id: int) -> list[int]:
        rows = await self.db.execute(
            select(CalfLoad.calf_id)
            .where(CalfLoad.load_id == load_id)
            .order_by(CalfLoad.calf_id),
        )
        return list(rows.scalars().all())

    async def _repick_members(
        self, load: Load, selector: LoadSelector, members: list[int],
    ) -> list[int]:
        """Apply a new selector to an existing load. Returns calves kept on it."""
        kept: list[int] = []
        if members and not selector.is_empty:
            rows = await self.db.execute(
                select(Calf.id)
                .where(Calf.id.in_(members), _selector_match(selector))
                .order_by(Calf.id),
            )
            kept = list(rows.scalars().all())

        removed = [calf_id for calf_id in members if calf_id not in kept]
        if removed:
            await self._restore_calves(
                load.id, removed, notes=f"Removed from load #{load.id} during edit",
            )
            await self.db.execute(
                delete(CalfLoad).where(
                    CalfLoad.load_id == load.id, CalfLoad.calf_id.in_(removed),
                ),
            )

        added: list[Candidate] = []
        if not selector.is_empty:
            candidates = [
                c for c in await self._resolve_candidates(selector, load.origin_ranch_id)
                if c.id not in kept
            ]
            added = await self._claim(
                candidates, load.origin_ranch_id, load.destination_ranch_id,
                load.destination_name, load.departure_date,
            )
            await self._link(load, added, load.departure_date)
            await self._record_history(
                load, added, load.origin_ranch_id, load.destination_ranch_id,
                load.departure_date, notes=f"Added to load #{load.id} during edit",
            )

        logger.info(
            f"Load {load.id} membership edited: {len(added)} added, "
            f"{len(removed)} removed, {len(kept)} kept",
            extra={"load_id": load.id, "head_count": len(kept) + len(added)},
        )
        return kept

    async def _refresh_members(self, load: Load, calf_ids: list[int]) -> None:
        """Carry a new departure date or destination onto calves already on the load."""
        values = {
            "shipped_out_date": load.departure_date,
            "shipped_to": load.destination_name,
        }
        if load.destination_ranch_id is not None:
            values["current_ranch_id"] = load.destination_ranch_id
        await self.db.execute(
            update(Calf).where(Calf.id.in_(calf_ids)).values(**values)
            .execution_options(synchronize_session=False),
        )

        rows = await self.db.execute(
            select(Calf.id, Calf.placed_date, Calf.pre_days_on_feed)
            .where(Calf.id.in_(calf_ids)),
        )
        for calf_id, placed_date, pre_days in rows.all():
            await self.db.execute(
                update(CalfLoad)
                .where(CalfLoad.load_id == load.id, CalfLoad.calf_id == calf_id)
                .values(days_on_feed_at_shipment=days_on_feed(
                    placed_date, pre_days, until=load.departure_date,
                ))
                .execution_options(synchronize_session=False),
            )

    # ─── arrival status ──────────────────────────────────────────

    async def update_load_calf_arrival_status(
        self,
        load_id: int,
        calf_id: int,
        acting_ranch_id: int,
        arrival_status: object,
    ) -> CalfLoad:
        async with unit_of_work(
            self.db, "update_arrival_status",
            load_id=load_id, calf_id=calf_id, acting_ranch_id=acting_ranch_id,
        ):
            load = await self._load(load_id)
            link = (await self.db.execute(
                select(CalfLoad).where(
                    CalfLoad.load_id == load_id, CalfLoad.calf_id == calf_id,
                ),
            )).scalar_one_or_none()
            if link is None:
                raise ResourceNotFoundError("CalfLoad", f"{load_id}/{calf_id}")
            if load.arrival_date is None:
                raise BusinessRuleError(
                    "Arrival status can only be set once the load has an arrival date",
                    code="LOAD_NOT_ARRIVED",
                )
            if not can_edit_arrival_status(
                acting_ranch_id, load.origin_ranch_id, load.destination_ranch_id,
            ):
                raise ForbiddenActionError(
                    f"Ranch {acting_ranch_id} cannot edit arrivals of load {load_id}",
                )
            status = parse_arrival_status(arrival_status)
            link.arrival_status = status.value if status else None
        return link

    # ─── delete_load ─────────────────────────────────────────────

    async def delete_load(self, load_id: int) -> dict:
        """Delete a load, putting each shipped calf back where it was."""
        async with unit_of_work(self.db, "delete_load", load_id=load_id):
            load = await self._load(load_id)
            calf_ids = list((await self.db.execute(
                select(CalfLoad.calf_id).where(CalfLoad.load_id == load.id),
            )).scalars().all())

            restored = await self._restore_calves(load.id, calf_ids) if calf_ids else []
            await self.db.execute(delete(Load).where(Load.id == load.id))
        logger.info(
            f"Load {load_id} deleted, {len(restored)} calves restored",
            extra={"load_id": load_id, "head_count": len(restored)},
        )
        return {"id": load_id, "restored_calf_ids": restored}

    async def _restore_calves(
        self, load_id: int, calf_ids: list[int], notes: str | None = None,
    ) -> list[int]:
        notes = notes or f"Load #{load_id} deleted. Calf restored to previous status"
        transfers = (await self.db.execute(
            select(CalfMovementHistory)
            .where(
                CalfMovementHistory.load_id == load_id,
                CalfMovementHistory.calf_id.in_(calf_ids),
                CalfMovementHistory.movement_type == MovementType.LOAD_TRANSFER.value,
            )
            .order_by(CalfMovementHistory.id.desc()),
        )).scalars().all()
        previous: dict[int, CalfMovementHistory] = {}
        for row in transfers:
            previous.setdefault(row.calf_id, row)

        calves = (await self.db.execute(
            select(Calf).where(Calf.id.in_(calf_ids)).order_by(Calf.id)
            .execution_options(populate_existing=True),
        )).scalars().all()

        now = datetime.now(timezone.utc)
        events = []
        for calf in calves:
            before = previous.get(calf.id)
            status = CalfStatus(
                (before.from_status if before else None) or CalfStatus.FEEDING.value,
            )
            ranch_id = (
                (before.from_ranch_id if before else None)
                or calf.origin_ranch_id or calf.current_ranch_id
            )
            events.append(StatusChange(
                calf_id=calf.id,
                event_date=now,
                from_status=CalfStatus(calf.status),
                to_status=status,
                from_ranch_id=calf.current_ranch_id,
                to_ranch_id=ranch_id,
                load_id=load_id,
                notes=notes,
            ))
            calf.status = status.value
            calf.sell_status = derive_sell_status(status).value
            calf.current_ranch_id = ranch_id
            calf.shipped_out_date = None
            calf.shipped_to = None

        await self.db.flush()
        if events:
            await self.db.execute(
                insert(CalfMovementHistory), [to_row(event) for event in events],
            )
        return [calf.id for calf in calves]
