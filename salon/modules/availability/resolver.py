"""
Bookable start times for one calendar day.

The pure part (``compute_slots``) works on already-loaded rules, blocks and
appointments so it can be exercised without a database. ``SlotResolver`` loads
those from the store and resolves the requested service's duration.
"""
import uuid
import logging
import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.config import settings
from salon.core.clock import now_local
from salon.modules.availability.intervals import intervals_overlap, to_minutes, parse_calendar_date
from salon.modules.availability.rules import (
    Window, applicable_rules, is_blocked_all_day, timed_blocks, rule_window, rule_slots,
)
from salon.modules.availability.repository import AvailabilityRepository
from salon.modules.appointments.models import Appointment
from salon.modules.appointments.repository import AppointmentRepository
from salon.modules.catalog.repository import ServiceRepository

logger = logging.getLogger(__name__)


@dataclass
class SlotResult:
    slots: list[str] = field(default_factory=list)
    duration: int = 0
    # True when the service had no duration and the default was used
    duration_fallback: bool = False


def occupied_window(appt: Appointment, service_minutes: int | None = None) -> Window:
    """
    [start, start + duration) for an existing appointment. Prefers the persisted
    duration, then the persisted end time, then ``service_minutes``, then the default.
    """
    start = to_minutes(appt.start_time)
    if appt.duration_minutes and appt.duration_minutes > 0:
        return Window(start, start + appt.duration_minutes)
    if appt.end_time and to_minutes(appt.end_time) > start:
        return Window(start, to_minutes(appt.end_time))
    return Window(start, start + (service_minutes or settings.DEFAULT_SERVICE_DURATION_MINUTES))


def compute_slots(
    d: dt.date,
    duration: int,
    rules: Iterable,
    blocks: Iterable,
    appointments: Iterable[Appointment],
    now: dt.datetime | None = None,
    service_minutes: dict | None = None,
) -> list[str]:
    rules_today = applicable_rules(rules, d)
    if not rules_today:
        return []

    blocks = list(blocks)
    if is_blocked_all_day(blocks, d):
        return []

    candidates: set[str] = set()
    for r in rules_today:
        candidates.update(rule_slots(r))

    windows = [rule_window(r) for r in rules_today]
    service_minutes = service_minutes or {}
    busy = [occupied_window(a, service_minutes.get(a.service_id)) for a in appointments]
    busy.extend(timed_blocks(blocks, d))

    cutoff = None
    if now is not None and now.date() == d:
        cutoff = now.hour * 60 + now.minute

    out = []
    for s in candidates:
        start = to_minutes(s)
        end = start + duration
        if any(intervals_overlap(start, end, b.start, b.end) for b in busy):
            continue
        if not any(w.start <= start and end <= w.end for w in windows):
            continue
        if cutoff is not None and start <= cutoff:
            continue
        out.append(s)
    return sorted(out, key=to_minutes)


class SlotResolver:
    def __init__(self, s: AsyncSession):
        self.s = s
        self.rules = AvailabilityRepository(s)
        self.appts = AppointmentRepository(s)
        self.services = ServiceRepository(s)

    async def service_duration(self, service_id: uuid.UUID | None) -> tuple[int, bool]:
        """(minutes, fell_back) for the service, falling back to the configured default."""
        minutes = await self.services.duration_of(service_id) if service_id else None
        if minutes and minutes > 0:
            return minutes, False
        logger.warning(
            f"No duration for service {service_id}; resolving with default "
            f"{settings.DEFAULT_SERVICE_DURATION_MINUTES} minutes"
        )
        return settings.DEFAULT_SERVICE_DURATION_MINUTES, True

    async def _legacy_durations(self, appts: Sequence[Appointment]) -> dict:
        # rows written without a duration or end time fall back to their service
        out = {}
        for a in appts:
            if a.duration_minutes or not a.service_id or a.service_id in out:
                continue
            out[a.service_id] = await self.services.duration_of(a.service_id)
        return out

    async def resolve(
        self,
        date: str | dt.date,
        service_id: uuid.UUID | None = None,
        duration: int | None = None,
        now: dt.datetime | None = None,
    ) -> SlotResult:
        d = parse_calendar_date(date)
        fallback = False
        if duration is None:
            duration, fallback = await self.service_duration(service_id)

        rules: Sequence = await self.rules.list_active_rules()
        if not applicable_rules(rules, d):
            return SlotResult([], duration, fallback)
        blocks = await self.rules.list_active_blocks()
        appts = await self.appts.list_occupying_on(d)
        service_minutes = await self._legacy_durations(appts)

        slots = compute_slots(d, duration, rules, blocks, appts, now or now_local(), service_minutes)
        logger.debug(f"Resolved {len(slots)} slots for {d} ({duration} min)")
        return SlotResult(slots, duration, fallback)
