# barbershop/services/availability/generator.py
"""
Slot generator: expand open-hour ranges into fixed-stride slot starts.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from .config import local_instant, minutes_to_time_str, time_str_to_minutes


def generate_slots(
    ranges: list[tuple[str, str]],
    slot_duration_minutes: int,
    allow_overrun: bool = True,
    target_date: date | None = None,
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
) -> list[str]:
    """
    Generate "HH:MM" slot starts for the given ranges.

    A range emits start, start + step, ... while the emitted start is before
    the range end. With allow_overrun=False the slot must also finish by
    the range end.

    When `now` is given (customer view), slots whose instant on target_date
    is not strictly after `now` are dropped.
    """
    if now is not None and (target_date is None or tz is None):
        raise ValueError("target_date and tz are required to filter by now")

    step = slot_duration_minutes
    slots: list[str] = []

    for start, end in ranges:
        start_min = time_str_to_minutes(start)
        end_min = time_str_to_minutes(end)

        t = start_min
        while t < end_min:
            if not allow_overrun and t + step > end_min:
                break

            time_str = minutes_to_time_str(t)
            if now is None or local_instant(target_date, time_str, tz) > now:
                slots.append(time_str)

            t += step

    return slots
