"""
Month-level availability legend.

Uses a count-based capacity check per day instead of running the exact slot
resolver for every day: a day is listed while fewer live appointments sit on it
than its rules generate slots. A listed day can still resolve to zero slots for a
long service; the day-level resolver is authoritative.
"""
import uuid
import logging
import datetime as dt
from collections import Counter
from dataclasses import dataclass
from typing import Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.clock import today_local
from salon.modules.availability.intervals import month_days
from salon.modules.availability.rules import applicable_rules, is_blocked_all_day, rule_slots
from salon.modules.availability.repository import AvailabilityRepository
from salon.modules.appointments.models import Appointment
from salon.modules.appointments.repository import AppointmentRepository

logger = logging.getLogger(__name__)


@dataclass
class DayAvailability:
    date: dt.date
    available: bool
    slot_count: int


def scan_days(
    days: Iterable[dt.date],
    rules: Iterable,
    blocks: Iterable,
    appointments: Iterable[Appointment],
    today: dt.date,
) -> list[DayAvailability]:
    rules = list(rules)
    blocks = list(blocks)
    booked = Counter(a.date for a in appointments)

    out = []
    for d in days:
        if d < today:
            continue
        rules_today = applicable_rules(rules, d)
        if not rules_today:
            continue
        if is_blocked_all_day(blocks, d):
            continue
        capacity = sum(len(rule_slots(r)) for r in rules_today)
        remaining = capacity - booked[d]
        if remaining > 0:
            out.append(DayAvailability(d, True, remaining))
    return out


class MonthScanner:
    def __init__(self, s: AsyncSession):
        self.s = s
        self.rules = AvailabilityRepository(s)
        self.appts = AppointmentRepository(s)

    async def scan(self, year: int, month: int, service_id: uuid.UUID | None = None, today: dt.date | None = None) -> list[DayAvailability]:
        # service_id is accepted for symmetry with slot resolution; capacity is not duration-aware
        days = month_days(year, month)
        rules = await self.rules.list_active_rules()
        blocks = await self.rules.list_active_blocks()
        appts = await self.appts.list_in_range(days[0], days[-1], occupying_only=True)
        result = scan_days(days, rules, blocks, appts, today or today_local())
        logger.debug(f"Month scan {year}-{month:02d}: {len(result)} open days")
        return result
