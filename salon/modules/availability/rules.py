from datetime import date
from typing import Iterable, NamedTuple
from salon.modules.availability.models import AvailabilityRule, BlockedDate
from salon.modules.availability.intervals import day_of_week, generate_slots, to_minutes

class Window(NamedTuple):
    start: int  # minutes past midnight
    end: int

def _matches_day(is_recurring: bool, rule_dow: int | None, rule_date: date | None, d: date) -> bool:
    if is_recurring:
        return rule_dow is not None and rule_dow == day_of_week(d)
    return rule_date is not None and rule_date == d

def rule_applies_to_date(rule: AvailabilityRule, d: date) -> bool:
    if not rule.active:
        return False
    return _matches_day(rule.is_recurring, rule.day_of_week, rule.date, d)

def block_applies(block: BlockedDate, d: date, time: str | None = None) -> bool:
    """
    True when the block covers ``d``. Without a ``time`` only all-day blocks match;
    with one, a timed block matches when start <= time < end.
    """
    if not block.active:
        return False
    if not _matches_day(block.is_recurring, block.day_of_week, block.date, d):
        return False
    if block.all_day:
        return True
    if time and block.start_time and block.end_time:
        return to_minutes(block.start_time) <= to_minutes(time) < to_minutes(block.end_time)
    return False

def rule_window(rule: AvailabilityRule) -> Window:
    return Window(to_minutes(rule.start_time), to_minutes(rule.end_time))

def block_window(block: BlockedDate) -> Window | None:
    if block.all_day or not (block.start_time and block.end_time):
        return None
    return Window(to_minutes(block.start_time), to_minutes(block.end_time))

def rule_slots(rule: AvailabilityRule) -> list[str]:
    return generate_slots(rule.start_time, rule.end_time, rule.slot_duration)

def applicable_rules(rules: Iterable[AvailabilityRule], d: date) -> list[AvailabilityRule]:
    return [r for r in rules if rule_applies_to_date(r, d)]

def is_blocked_all_day(blocks: Iterable[BlockedDate], d: date) -> bool:
    return any(block_applies(b, d) for b in blocks)

def timed_blocks(blocks: Iterable[BlockedDate], d: date) -> list[Window]:
    out = []
    for b in blocks:
        w = block_window(b)
        if w is not None and b.active and _matches_day(b.is_recurring, b.day_of_week, b.date, d):
            out.append(w)
    return out
