"""Tests for day-level slot resolution."""

from datetime import date, datetime

import pytest

from salon.modules.availability.intervals import intervals_overlap, to_minutes
from salon.modules.availability.models import AvailabilityRule, BlockedDate
from salon.modules.appointments.models import Appointment
from salon.modules.availability.resolver import compute_slots, occupied_window, SlotResolver

MONDAY = date(2025, 3, 10)
NEXT_MONDAY = date(2025, 3, 17)
EARLIER = datetime(2025, 3, 1, 8, 0)


def _rule(**kw):
    base = dict(is_recurring=True, day_of_week=1, date=None, all_day=False, start_time="09:00", end_time="17:00", slot_duration=30, active=True)
    base.update(kw)
    return AvailabilityRule(**base)


def _appt(start, minutes, status="confirmed", **kw):
    base = dict(date=MONDAY, start_time=start, end_time="", duration_minutes=minutes, status=status, is_blocked=False)
    base.update(kw)
    return Appointment(**base)


def _full_day():
    return [f"{h:02d}:{m:02d}" for h in range(9, 17) for m in (0, 30)]


def test_no_rule_means_no_slots():
    assert compute_slots(MONDAY, 30, [], [], [], EARLIER) == []
    # a Tuesday rule does not open Monday
    assert compute_slots(MONDAY, 30, [_rule(day_of_week=2)], [], [], EARLIER) == []


def test_weekly_hours_monday():
    slots = compute_slots(MONDAY, 30, [_rule()], [], [], EARLIER)
    assert slots == _full_day()
    assert len(slots) == 16


def test_existing_appointment_blocks_its_whole_duration():
    appt = _appt("10:00", 60)
    slots = compute_slots(MONDAY, 30, [_rule()], [], [appt], EARLIER)
    assert "10:00" not in slots
    assert "10:30" not in slots
    assert "09:30" in slots
    assert "11:00" in slots


def test_returned_slots_never_overlap_appointments():
    appts = [_appt("09:30", 45), _appt("13:00", 90), _appt("16:15", 15)]
    duration = 60
    slots = compute_slots(MONDAY, duration, [_rule()], [], appts, EARLIER)
    assert slots
    for s in slots:
        start = to_minutes(s)
        for a in appts:
            w = occupied_window(a)
            assert not intervals_overlap(start, start + duration, w.start, w.end)


def test_all_day_block_voids_the_day():
    block = BlockedDate(is_recurring=False, date=MONDAY, all_day=True, reason="Holiday", active=True)
    assert compute_slots(MONDAY, 30, [_rule()], [block], [], EARLIER) == []


def test_inactive_block_is_ignored():
    block = BlockedDate(is_recurring=False, date=MONDAY, all_day=True, reason="Holiday", active=False)
    assert len(compute_slots(MONDAY, 30, [_rule()], [block], [], EARLIER)) == 16


def test_timed_block_removes_overlapping_slots():
    block = BlockedDate(is_recurring=False, date=MONDAY, all_day=False, start_time="12:00", end_time="13:00", reason="Lunch", active=True)
    slots = compute_slots(MONDAY, 30, [_rule()], [block], [], EARLIER)
    assert "12:00" not in slots and "12:30" not in slots
    assert "11:30" in slots and "13:00" in slots

    longer = compute_slots(MONDAY, 60, [_rule()], [block], [], EARLIER)
    assert "11:30" not in longer


def test_slots_fit_inside_a_window():
    rule = _rule(start_time="09:00", end_time="10:00")
    assert compute_slots(MONDAY, 60, [rule], [], [], EARLIER) == ["09:00"]
    assert compute_slots(MONDAY, 90, [rule], [], [], EARLIER) == []


def test_mixed_granularity_rules_union_and_sort():
    a = _rule(start_time="09:00", end_time="10:00", slot_duration=30)
    b = _rule(start_time="09:00", end_time="10:00", slot_duration=20)
    assert compute_slots(MONDAY, 30, [b, a], [], [], EARLIER) == ["09:00", "09:20", "09:30"]


def test_duplicate_rules_do_not_duplicate_slots():
    slots = compute_slots(MONDAY, 30, [_rule(), _rule()], [], [], EARLIER)
    assert len(slots) == len(set(slots)) == 16


def test_specific_date_rule_adds_to_weekly_hours():
    morning = _rule(start_time="09:00", end_time="10:00")
    extra = _rule(is_recurring=False, day_of_week=None, date=MONDAY, start_time="18:00", end_time="19:00")
    assert compute_slots(MONDAY, 30, [morning, extra], [], [], EARLIER) == ["09:00", "09:30", "18:00", "18:30"]


def test_today_drops_past_and_current_times():
    now = datetime(2025, 3, 10, 12, 0)
    slots = compute_slots(MONDAY, 30, [_rule()], [], [], now)
    assert slots[0] == "12:30"
    assert all(to_minutes(s) > 12 * 60 for s in slots)


def test_past_time_filter_only_applies_to_today():
    now = datetime(2025, 3, 10, 15, 0)
    assert len(compute_slots(NEXT_MONDAY, 30, [_rule()], [], [], now)) == 16


def test_occupied_window_fallbacks():
    assert occupied_window(_appt("10:00", 45)) == (600, 645)
    assert occupied_window(_appt("10:00", 0, end_time="11:15")) == (600, 675)
    assert occupied_window(_appt("10:00", 0), service_minutes=90) == (600, 690)
    assert occupied_window(_appt("10:00", 0)) == (600, 630)


@pytest.mark.asyncio
async def test_resolver_uses_service_duration(db, weekday_hours, salon_service):
    result = await SlotResolver(db).resolve("2025-03-10", service_id=salon_service.id, now=EARLIER)
    assert result.duration == 60
    assert result.duration_fallback is False
    assert result.slots[-1] == "16:00"


@pytest.mark.asyncio
async def test_resolver_reports_duration_fallback(db, weekday_hours):
    result = await SlotResolver(db).resolve("2025-03-10", service_id=None, now=EARLIER)
    assert result.duration == 30
    assert result.duration_fallback is True
    assert len(result.slots) == 16


@pytest.mark.asyncio
async def test_resolver_ignores_cancelled_appointments(db, weekday_hours):
    db.add(Appointment(date=MONDAY, start_time="10:00", end_time="11:00", duration_minutes=60, status="cancelled"))
    db.add(Appointment(date=MONDAY, start_time="14:00", end_time="15:00", duration_minutes=60, status="pending"))
    await db.commit()

    result = await SlotResolver(db).resolve(MONDAY, duration=30, now=EARLIER)
    assert "10:00" in result.slots
    assert "14:00" not in result.slots and "14:30" not in result.slots
