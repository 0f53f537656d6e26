from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from barbershop.services.availability.config import time_str_to_minutes
from barbershop.services.availability.generator import generate_slots

from .conftest import MONDAY

ROME = ZoneInfo("Europe/Rome")


def test_morning_range_with_45_minute_slots():
    slots = generate_slots([("09:00", "13:00")], 45)
    assert slots == ["09:00", "09:45", "10:30", "11:15", "12:00", "12:45"]


def test_overrun_disabled_drops_the_slot_past_closing():
    slots = generate_slots([("09:00", "13:00")], 45, allow_overrun=False)
    assert slots == ["09:00", "09:45", "10:30", "11:15", "12:00"]


def test_exact_fit_keeps_last_slot_without_overrun():
    assert generate_slots([("09:00", "10:00")], 30, allow_overrun=False) == ["09:00", "09:30"]


def test_ranges_are_processed_in_order():
    slots = generate_slots([("09:00", "10:00"), ("15:00", "16:00")], 30)
    assert slots == ["09:00", "09:30", "15:00", "15:30"]


@pytest.mark.parametrize("duration", [15, 30, 45, 60])
def test_starts_are_increasing_multiples_of_the_stride(duration):
    start, end = "08:30", "19:15"
    slots = generate_slots([(start, end)], duration)
    minutes = [time_str_to_minutes(s) for s in slots]

    assert minutes == sorted(set(minutes))
    assert all((m - time_str_to_minutes(start)) % duration == 0 for m in minutes)
    assert all(m < time_str_to_minutes(end) for m in minutes)


def test_empty_ranges_mean_no_slots():
    assert generate_slots([], 45) == []


def test_now_filter_keeps_only_future_slots():
    # 10:30 Rome == 09:30 UTC
    now = datetime(2030, 1, 7, 9, 30, tzinfo=timezone.utc)
    slots = generate_slots([("09:00", "13:00")], 45, target_date=MONDAY, now=now, tz=ROME)
    assert slots == ["11:15", "12:00", "12:45"]


def test_now_filter_on_a_future_day_keeps_everything():
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    slots = generate_slots([("09:00", "13:00")], 45, target_date=MONDAY, now=now, tz=ROME)
    assert len(slots) == 6


def test_now_filter_needs_date_and_timezone():
    with pytest.raises(ValueError):
        generate_slots([("09:00", "13:00")], 45, now=datetime.now(timezone.utc))
