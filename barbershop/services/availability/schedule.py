# barbershop/services/availability/schedule.py
"""
Schedule source: which open-hour ranges apply to a calendar date.

Inputs:
✓ shop_settings.open_hours (weekly template)
✓ day_overrides (single-date OPEN / CLOSED exceptions)

Does NOT look at:
✗ Slot blocks (classifier)
✗ Appointments (classifier / transaction)
"""

import json
import logging
from datetime import date

from .config import WEEKDAY_NAMES

logger = logging.getLogger(__name__)

OVERRIDE_OPEN = "OPEN"
OVERRIDE_CLOSED = "CLOSED"

DAY_CLOSED = "closed"
DAY_STANDARD = "standard"
DAY_EXTRAORDINARY = "extraordinary"


def parse_open_hours(raw: str | dict | None) -> dict:
    """Decode shop_settings.open_hours; malformed JSON means an empty week."""
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        schedule = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("shop_settings.open_hours is not valid JSON, treating the shop as closed")
        return {}
    return schedule if isinstance(schedule, dict) else {}


def weekday_ranges(schedule: dict, weekday_name: str) -> list[tuple[str, str]]:
    """
    Ranges for one weekday of the template.

    Supports named keys ("mon".."sun") and numeric keys ("0".."6").
    """
    day_data = schedule.get(weekday_name)
    if day_data is None:
        day_data = schedule.get(str(WEEKDAY_NAMES.index(weekday_name)))

    if not day_data:
        return []

    if isinstance(day_data, dict):
        start = day_data.get("start")
        end = day_data.get("end")
        return [(start, end)] if start and end else []

    ranges = []
    for interval in day_data:
        if len(interval) != 2:
            continue
        ranges.append((interval[0], interval[1]))
    return ranges


def resolve_day_ranges(
    schedule: dict,
    override,
    target_date: date,
    fallback_weekday: str = "mon",
) -> list[tuple[str, str]]:
    """
    Return the open-hour ranges that apply to target_date.

    - CLOSED override → no ranges, whatever the weekday says
    - OPEN override → the weekday's own ranges, or the fallback weekday's
      ranges when the weekday is normally closed
    - no override → the weekday's ranges as configured (maybe empty)
    """
    own = weekday_ranges(schedule, WEEKDAY_NAMES[target_date.weekday()])

    if override is None:
        return own

    if override.state == OVERRIDE_CLOSED:
        return []

    if own:
        return own
    return weekday_ranges(schedule, fallback_weekday)


def day_status(schedule: dict, override, target_date: date) -> str:
    """Label for the owner's workday view."""
    if override is not None:
        if override.state == OVERRIDE_CLOSED:
            return DAY_CLOSED
        return DAY_EXTRAORDINARY

    if weekday_ranges(schedule, WEEKDAY_NAMES[target_date.weekday()]):
        return DAY_STANDARD
    return DAY_CLOSED
