import uuid
import logging
import datetime as dt
from typing import Any
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.config import settings
from salon.core.errors import ValidationError, NotFoundError
from salon.modules.availability.repository import AvailabilityRepository
from salon.modules.availability.models import AvailabilityRule, BlockedDate
from salon.modules.availability.schemas import (
    AvailabilityCreate, AvailabilityUpdate, WeeklyAvailabilitySet, BlockedDateCreate, BlockedDateUpdate,
)
from salon.modules.availability.intervals import is_clock_time, to_minutes, to_clock, parse_calendar_date, month_days
from salon.modules.appointments.repository import AppointmentRepository
from salon.modules.events.outbox import OutboxService

logger = logging.getLogger(__name__)

MIN_SLOT_MINUTES = 15
MAX_SLOT_MINUTES = 120

_RULE_FIELDS = ("is_recurring", "day_of_week", "date", "all_day", "start_time", "end_time", "slot_duration", "active", "notes")
_BLOCK_FIELDS = ("is_recurring", "day_of_week", "date", "all_day", "start_time", "end_time", "reason", "active")


def _check_scope(data: dict, what: str) -> None:
    if data.get("is_recurring"):
        dow = data.get("day_of_week")
        if dow is None or not isinstance(dow, int) or not 0 <= dow <= 6:
            raise ValidationError(f"Invalid day of week for recurring {what}.")
        data["date"] = None
    else:
        if data.get("date") is None:
            raise ValidationError(f"Date is required for non-recurring {what}.")
        data["date"] = parse_calendar_date(data["date"])
        data["day_of_week"] = None


def _check_time_range(data: dict, what: str) -> None:
    start, end = data.get("start_time"), data.get("end_time")
    if not start or not end:
        raise ValidationError(f"Start time and end time are required for non-all-day {what}.")
    if not is_clock_time(start) or not is_clock_time(end):
        raise ValidationError("Times must be in HH:MM 24-hour format.")
    if to_minutes(start) >= to_minutes(end):
        raise ValidationError("Start time must be before end time.")
    data["start_time"], data["end_time"] = to_clock(to_minutes(start)), to_clock(to_minutes(end))


def validate_rule(data: dict) -> dict:
    _check_scope(data, "availability")
    if data.get("all_day"):
        data["start_time"], data["end_time"] = settings.ALL_DAY_START, settings.ALL_DAY_END
    else:
        _check_time_range(data, "availability")
    slot = data.get("slot_duration")
    if slot is None:
        slot = settings.DEFAULT_SLOT_MINUTES
    if not MIN_SLOT_MINUTES <= slot <= MAX_SLOT_MINUTES:
        raise ValidationError(f"Slot duration must be between {MIN_SLOT_MINUTES} and {MAX_SLOT_MINUTES} minutes.")
    data["slot_duration"] = slot
    return data


def validate_block(data: dict) -> dict:
    _check_scope(data, "blocks")
    if data.get("all_day"):
        data["start_time"], data["end_time"] = None, None
    else:
        _check_time_range(data, "blocks")
    reason = (data.get("reason") or "").strip()
    if not reason:
        raise ValidationError("Reason is required.")
    data["reason"] = reason
    return data


def _snapshot(obj: Any, fields: tuple[str, ...]) -> dict:
    return {f: getattr(obj, f) for f in fields}


class AvailabilityService:
    def __init__(self, s: AsyncSession):
        self.s = s
        self.repo = AvailabilityRepository(s)

    # ---- Availability rules ----
    async def list_rules(self):
        return await self.repo.list_active_rules()

    async def create_rule(self, payload: AvailabilityCreate) -> AvailabilityRule:
        data = validate_rule(payload.model_dump())
        obj = await self.repo.create_rule(active=True, **data)
        await OutboxService(self.s).enqueue("AVAILABILITY_CREATED", "availability_rule", obj.id, self._rule_event(obj))
        await self.s.commit()
        logger.info(f"Availability rule {obj.id} created")
        return obj

    async def update_rule(self, rule_id: uuid.UUID, payload: AvailabilityUpdate) -> AvailabilityRule:
        obj = await self.repo.get_rule(rule_id)
        if not obj:
            raise NotFoundError("Availability not found.")
        merged = _snapshot(obj, _RULE_FIELDS)
        merged.update(payload.model_dump(exclude_unset=True))
        data = validate_rule(merged)
        for k, v in data.items():
            setattr(obj, k, v)
        await OutboxService(self.s).enqueue("AVAILABILITY_UPDATED", "availability_rule", obj.id, self._rule_event(obj))
        await self.s.commit()
        return obj

    async def delete_rule(self, rule_id: uuid.UUID) -> None:
        obj = await self.repo.get_rule(rule_id)
        if not obj:
            raise NotFoundError("Availability not found.")
        await self.repo.delete_rule(obj)
        await OutboxService(self.s).enqueue("AVAILABILITY_DELETED", "availability_rule", rule_id, {})
        await self.s.commit()

    async def set_weekly(self, payload: WeeklyAvailabilitySet) -> AvailabilityRule:
        """Upsert the recurring rule for one day of the week."""
        data = validate_rule({**payload.model_dump(), "is_recurring": True, "all_day": False})
        obj = await self.repo.get_recurring_rule(data["day_of_week"])
        if obj:
            for k in ("start_time", "end_time", "slot_duration", "notes"):
                setattr(obj, k, data[k])
            obj.active = True
        else:
            obj = await self.repo.create_rule(active=True, **data)
        await OutboxService(self.s).enqueue("AVAILABILITY_UPDATED", "availability_rule", obj.id, self._rule_event(obj))
        await self.s.commit()
        return obj

    async def deactivate_weekly(self, day_of_week: int) -> None:
        obj = await self.repo.get_recurring_rule(day_of_week)
        if not obj:
            raise NotFoundError("Availability not found for this day.")
        obj.active = False
        await OutboxService(self.s).enqueue("AVAILABILITY_UPDATED", "availability_rule", obj.id, self._rule_event(obj))
        await self.s.commit()

    # ---- Blocked dates ----
    async def list_blocks(self):
        return await self.repo.list_active_blocks()

    async def create_block(self, payload: BlockedDateCreate) -> BlockedDate:
        data = validate_block(payload.model_dump())
        obj = await self.repo.create_block(active=True, **data)
        await OutboxService(self.s).enqueue("BLOCKED_DATE_CREATED", "blocked_date", obj.id, {"reason": obj.reason})
        await self.s.commit()
        logger.info(f"Blocked date {obj.id} created ({obj.reason})")
        return obj

    async def update_block(self, block_id: uuid.UUID, payload: BlockedDateUpdate) -> BlockedDate:
        obj = await self.repo.get_block(block_id)
        if not obj:
            raise NotFoundError("Blocked date not found.")
        merged = _snapshot(obj, _BLOCK_FIELDS)
        merged.update(payload.model_dump(exclude_unset=True))
        data = validate_block(merged)
        for k, v in data.items():
            setattr(obj, k, v)
        await OutboxService(self.s).enqueue("BLOCKED_DATE_UPDATED", "blocked_date", obj.id, {"reason": obj.reason, "active": obj.active})
        await self.s.commit()
        return obj

    async def delete_block(self, block_id: uuid.UUID) -> None:
        obj = await self.repo.get_block(block_id)
        if not obj:
            raise NotFoundError("Blocked date not found.")
        await self.repo.delete_block(obj)
        await OutboxService(self.s).enqueue("BLOCKED_DATE_DELETED", "blocked_date", block_id, {})
        await self.s.commit()

    # ---- Admin calendar feed ----
    async def calendar(self, year: int, month: int) -> dict:
        days = month_days(year, month)
        appts = await AppointmentRepository(self.s).list_in_range(days[0], days[-1])
        return {
            "appointments": appts,
            "blocked_dates": await self.repo.list_active_blocks(),
            "availability": await self.repo.list_active_rules(),
        }

    @staticmethod
    def _rule_event(obj: AvailabilityRule) -> dict:
        return {
            "is_recurring": obj.is_recurring,
            "day_of_week": obj.day_of_week,
            "date": obj.date.isoformat() if isinstance(obj.date, dt.date) else None,
            "start_time": obj.start_time,
            "end_time": obj.end_time,
            "active": obj.active,
        }
