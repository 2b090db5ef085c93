"""
Time-of-day and calendar-day helpers shared by the slot resolver and the month scanner.

Clock times travel as "HH:MM" strings and are compared as minute offsets from
midnight. Calendar days are plain ``datetime.date`` values; nothing here knows
about instants or timezones.
"""
import calendar
import re
from datetime import date, datetime, timedelta

from salon.core.errors import ValidationError

_HHMM = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
_ISO_DAY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:$|T)")


def is_clock_time(value: str | None) -> bool:
    return bool(value) and _HHMM.match(value) is not None


def to_minutes(t: str) -> int:
    """Convert HH:MM string to minutes since midnight."""
    m = _HHMM.match(t or "")
    if not m:
        raise ValidationError(f"Invalid time '{t}', expected HH:MM.")
    return int(m.group(1)) * 60 + int(m.group(2))


def to_clock(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def generate_slots(start_time: str, end_time: str, granularity_minutes: int) -> list[str]:
    """
    Slot start times from ``start_time`` every ``granularity_minutes``, keeping
    only starts whose full granularity-long slot still ends by ``end_time``.
    """
    if granularity_minutes <= 0:
        raise ValidationError("Slot granularity must be a positive number of minutes.")
    current = to_minutes(start_time)
    end = to_minutes(end_time)
    out = []
    while current + granularity_minutes <= end:
        out.append(to_clock(current))
        current += granularity_minutes
    return out


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # half-open [start, end)
    return start_a < end_b and start_b < end_a


def day_of_week(d: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


def parse_calendar_date(value: str | date | datetime | None) -> date:
    """
    Accepts ``YYYY-MM-DD`` or an ISO timestamp. For timestamps only the leading
    calendar day is kept as written, so "2025-03-10T23:30:00-05:00" is March 10th.
    """
    if value is None or value == "":
        raise ValidationError("Date is required.")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    m = _ISO_DAY.match(str(value).strip())
    if not m:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD.")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        raise ValidationError(f"Invalid date '{value}'.")


def month_days(year: int, month: int) -> list[date]:
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {month}, expected 1..12.")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year {year}.")
    first = date(year, month, 1)
    return [first + timedelta(days=offset) for offset in range(calendar.monthrange(year, month)[1])]
