"""Calf Ledger — intake, patching and lookup of calves, with history on every change.

Invariants:
    - Breed and seller are always stored in canonical form (CanonicalNameResolver)
    - sell_status is derived from status unless given explicitly
    - Every intake writes one INTAKE history row in the same unit of work
    - A patch that sets death_date forces status DECEASED
    - A patch that moves the calf writes RANCH_TRANSFER; a patch that changes
      status writes DEATH / SHIPPED_OUT / STATUS_CHANGE; each status transition
      has exactly one history row, so a RANCH_TRANSFER written alongside a
      status event carries no status
    - create_many is all-or-nothing

Design Decisions:
    - Status patches are accepted even off the lifecycle table (correction path);
      they are logged as warnings instead of rejected
    - Ranch references are checked up front so a bad id is a
      ReferentialIntegrityError with a readable message, not a driver error
"""

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from calftrack.core.calf_lifecycle import (
    derive_sell_status,
    is_lifecycle_transition,
    movement_type_for_status,
    parse_calf_type,
    parse_sell_status,
    parse_sex,
    parse_status,
)
from calftrack.core.date_values import normalize_date_field
from calftrack.core.domain_types import CalfStatus, MovementType, RegistryKind
from calftrack.core.errors import (
    CalftrackError,
    FieldValidationError,
    ReferentialIntegrityError,
    ResourceNotFoundError,
)
from calftrack.core.load_selection import normalize_identifier_list
from calftrack.core.movement_events import (
    Death, Intake, MovementEvent, RanchTransfer, ShippedOut, StatusChange, to_row,
)
from calftrack.core.repository_protocols import CanonicalNameResolver
from calftrack.models.calf import Calf
from calftrack.models.calf_movement import CalfMovementHistory
from calftrack.models.ranch import Ranch
from calftrack.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

DATE_FIELDS = ("placed_date", "death_date", "shipped_out_date")
TEXT_FIELDS = ("original_id", "dairy", "condition", "shipped_to")
NUMBER_FIELDS = ("price", "sell_price", "weight")


def _identifier(value: object) -> str | None:
    values = normalize_identifier_list([value])
    return values[0] if values else None


def _text(value: object) -> str | None:
    text = str(value).strip() if value is not None else ""
    return text or None


def _number(value: object, field: str) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise FieldValidationError(f"Invalid number for '{field}'", field, value)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise FieldValidationError(f"Invalid number for '{field}'", field, value)


def _pre_days(value: object) -> int | None:
    if value is None or value == "":
        return None
    try:
        days = int(float(value))
    except (TypeError, ValueError):
        raise FieldValidationError(
            "Invalid pre days on feed", "pre_days_on_feed", value,
        )
    if days < 0:
        raise FieldValidationError(
            "Pre days on feed cannot be negative", "pre_days_on_feed", value,
        )
    return days


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CalfLedger:
    """Owns calf rows; every mutation also appends movement history."""

    def __init__(self, db: AsyncSession, names: CanonicalNameResolver):
        self.db = db
        self.names = names

    # ─── Helpers ─────────────────────────────────────────────────

    async def _require_ranch(self, ranch_id: object, field: str) -> int:
        if ranch_id is None or ranch_id == "":
            raise FieldValidationError(f"'{field}' is required", field, ranch_id)
        try:
            ranch_id = int(ranch_id)
        except (TypeError, ValueError):
            raise FieldValidationError(f"Invalid ranch id for '{field}'", field, ranch_id)
        exists = await self.db.execute(select(Ranch.id).where(Ranch.id == ranch_id))
        if exists.first() is None:
            raise ReferentialIntegrityError(f"Ranch {ranch_id} does not exist")
        return ranch_id

    async def _canonical(self, kind: RegistryKind, raw: object) -> str:
        field = kind.value
        if _text(raw) is None:
            raise FieldValidationError(f"'{field}' is required", field, raw)
        name = await self.names.ensure_canonical_name(kind, str(raw))
        if name is None:
            raise FieldValidationError(
                f"Unknown {field} '{raw}' (not in catalog)", field, raw,
            )
        return name

    async def _append(self, events: Iterable[MovementEvent]) -> None:
        rows = [to_row(event) for event in events]
        if rows:
            await self.db.execute(insert(CalfMovementHistory), rows)

    async def _build(self, record: dict, created_by: str | None) -> Calf:
        primary_id = _identifier(record.get("primary_id"))
        if primary_id is None:
            raise FieldValidationError("'primary_id' is required", "primary_id", None)

        current_ranch_id = await self._require_ranch(
            record.get("current_ranch_id"), "current_ranch_id",
        )
        origin_raw = record.get("origin_ranch_id")
        origin_ranch_id = (
            current_ranch_id if origin_raw in (None, "")
            else await self._require_ranch(origin_raw, "origin_ranch_id")
        )

        dates = {field: normalize_date_field(record.get(field), field) for field in DATE_FIELDS}
        status = (
            parse_status(record["status"]) if _text(record.get("status"))
            else CalfStatus.FEEDING
        )
        if dates["death_date"] is not None:
            status = CalfStatus.DECEASED
        explicit_sell = (
            parse_sell_status(record["sell_status"]) if _text(record.get("sell_status"))
            else None
        )
        calf_type = (
            parse_calf_type(record["calf_type"]).value
            if _text(record.get("calf_type")) else None
        )

        return Calf(
            primary_id=primary_id,
            eid=_identifier(record.get("eid")),
            breed=await self._canonical(RegistryKind.BREED, record.get("breed")),
            seller=await self._canonical(RegistryKind.SELLER, record.get("seller")),
            sex=parse_sex(record.get("sex")).value,
            current_ranch_id=current_ranch_id,
            origin_ranch_id=origin_ranch_id,
            status=status.value,
            sell_status=derive_sell_status(status, explicit_sell).value,
            calf_type=calf_type,
            pre_days_on_feed=_pre_days(record.get("pre_days_on_feed")),
            created_by=created_by,
            **dates,
            **{field: _text(record.get(field)) for field in TEXT_FIELDS},
            **{field: _number(record.get(field), field) for field in NUMBER_FIELDS},
        )

    async def _intake(self, record: dict, created_by: str | None) -> Calf:
        calf = await self._build(record, created_by)
        self.db.add(calf)
        await self.db.flush()
        await self._append([Intake(
            calf_id=calf.id,
            event_date=calf.placed_date or _now(),
            to_ranch_id=calf.current_ranch_id,
            to_status=CalfStatus(calf.status),
        )])
        return calf

    # ─── Commands ────────────────────────────────────────────────

    async def create(self, record: dict, created_by: str | None = None) -> Calf:
        async with unit_of_work(self.db, "create_calf"):
            calf = await self._intake(record, created_by)
        logger.info(
            f"Calf {calf.primary_id} received",
            extra={"calf_id": calf.id, "ranch_id": calf.current_ranch_id},
        )
        return calf

    async def create_many(
        self, records: list[dict], created_by: str | None = None,
    ) -> list[Calf]:
        """Bulk intake: every record is stored, or none is."""
        calves: list[Calf] = []
        async with unit_of_work(
            self.db, "create_calves", record_count=len(records),
        ):
            for index, record in enumerate(records):
                try:
                    calves.append(await self._intake(record, created_by))
                except CalftrackError as e:
                    e.context.details = [
                        {**detail, "record": index}
                        for detail in (e.context.details or [{"message": e.message}])
                    ]
                    raise
        logger.info(
            f"Bulk intake stored {len(calves)} calves",
            extra={"record_count": len(calves)},
        )
        return calves

    async def update(self, calf_id: int, patch: dict) -> Calf:
        async with unit_of_work(self.db, "update_calf", calf_id=calf_id):
            calf = await self.find_one(calf_id)
            events = await self._apply_patch(calf, dict(patch))
            await self.db.flush()
            await self._append(events)
        return calf

    async def _apply_patch(self, calf: Calf, patch: dict) -> list[MovementEvent]:
        previous_status = CalfStatus(calf.status)
        previous_ranch_id = calf.current_ranch_id

        for field in DATE_FIELDS:
            if field in patch:
                patch[field] = normalize_date_field(patch[field], field)
        if patch.get("death_date") is not None:
            patch["status"] = CalfStatus.DECEASED.value

        if "primary_id" in patch:
            primary_id = _identifier(patch["primary_id"])
            if primary_id is None:
                raise FieldValidationError("'primary_id' is required", "primary_id", None)
            calf.primary_id = primary_id
        if "eid" in patch:
            calf.eid = _identifier(patch["eid"])
        if "breed" in patch:
            calf.breed = await self._canonical(RegistryKind.BREED, patch["breed"])
        if "seller" in patch:
            calf.seller = await self._canonical(RegistryKind.SELLER, patch["seller"])
        if "sex" in patch:
            calf.sex = parse_sex(patch["sex"]).value
        if "calf_type" in patch:
            calf.calf_type = (
                parse_calf_type(patch["calf_type"]).value
                if _text(patch["calf_type"]) else None
            )
        if "pre_days_on_feed" in patch:
            calf.pre_days_on_feed = _pre_days(patch["pre_days_on_feed"])
        if "origin_ranch_id" in patch:
            calf.origin_ranch_id = await self._require_ranch(
                patch["origin_ranch_id"], "origin_ranch_id",
            )
        if "current_ranch_id" in patch:
            calf.current_ranch_id = await self._require_ranch(
                patch["current_ranch_id"], "current_ranch_id",
            )
        for field in DATE_FIELDS:
            if field in patch:
                setattr(calf, field, patch[field])
        for field in TEXT_FIELDS:
            if field in patch:
                setattr(calf, field, _text(patch[field]))
        for field in NUMBER_FIELDS:
            if field in patch:
                setattr(calf, field, _number(patch[field], field))

        status = previous_status
        if _text(patch.get("status")):
            status = parse_status(patch["status"])
            calf.status = status.value
        if _text(patch.get("sell_status")):
            calf.sell_status = parse_sell_status(patch["sell_status"]).value
        elif status != previous_status:
            calf.sell_status = derive_sell_status(status).value

        return self._history_for_patch(
            calf, previous_status, previous_ranch_id, status,
            moved_on=patch.get("shipped_out_date") or _now(),
        )

    def _history_for_patch(
        self,
        calf: Calf,
        previous_status: CalfStatus,
        previous_ranch_id: int | None,
        status: CalfStatus,
        moved_on: datetime,
    ) -> list[MovementEvent]:
        events: list[MovementEvent] = []
        status_changed = status != previous_status
        if calf.current_ranch_id != previous_ranch_id:
            # the status event below owns the transition
            held = None if status_changed else status
            events.append(RanchTransfer(
                calf_id=calf.id,
                event_date=moved_on,
                from_ranch_id=previous_ranch_id,
                to_ranch_id=calf.current_ranch_id,
                from_status=held,
                to_status=held,
            ))

        if not status_changed:
            return events

        if not is_lifecycle_transition(previous_status, status):
            logger.warning(
                f"Calf {calf.id} moved off lifecycle: {previous_status.value} -> {status.value}",
                extra={"calf_id": calf.id},
            )
        notes = f"Status changed from {previous_status.value} to {status.value}"
        kind = movement_type_for_status(status)
        if kind == MovementType.DEATH:
            events.append(Death(
                calf_id=calf.id, event_date=calf.death_date or _now(),
                from_status=previous_status, ranch_id=calf.current_ranch_id,
                notes=notes,
            ))
        elif kind == MovementType.SHIPPED_OUT:
            events.append(ShippedOut(
                calf_id=calf.id, event_date=calf.shipped_out_date or _now(),
                from_status=previous_status, ranch_id=calf.current_ranch_id,
                notes=notes,
            ))
        else:
            events.append(StatusChange(
                calf_id=calf.id, event_date=_now(),
                from_status=previous_status, to_status=status,
                from_ranch_id=previous_ranch_id, to_ranch_id=calf.current_ranch_id,
                notes=notes,
            ))
        return events

    async def delete(self, calf_id: int) -> dict:
        async with unit_of_work(self.db, "delete_calf", calf_id=calf_id):
            calf = await self.find_one(calf_id)
            await self.db.execute(delete(Calf).where(Calf.id == calf.id))
        return {"id": calf_id}

    # ─── Queries ─────────────────────────────────────────────────

    async def find_one(self, calf_id: int) -> Calf:
        calf = await self.db.get(Calf, calf_id, populate_existing=True)
        if calf is None:
            raise ResourceNotFoundError("Calf", calf_id)
        return calf

    async def _find(self, *criteria, newest_first: bool = False) -> list[Calf]:
        order = Calf.id.desc() if newest_first else Calf.id
        result = await self.db.execute(
            select(Calf).where(*criteria).order_by(order)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    async def find_all_by_ranch(self, origin_ranch_id: int) -> list[Calf]:
        return await self._find(Calf.origin_ranch_id == origin_ranch_id)

    async def find_inventory_by_ranch(self, current_ranch_id: int) -> list[Calf]:
        return await self._find(
            Calf.current_ranch_id == current_ranch_id,
            Calf.status == CalfStatus.FEEDING.value,
        )

    async def find_manage_by_ranch(self, ranch_id: int) -> list[Calf]:
        """Calves at the ranch now plus every calf that started there."""
        return await self._find(
            or_(Calf.current_ranch_id == ranch_id, Calf.origin_ranch_id == ranch_id),
            newest_first=True,
        )
