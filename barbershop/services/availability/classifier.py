# barbershop/services/availability/classifier.py
"""
Availability classifier: label generated slots free / booked / blocked.

Bonus appointments are left out of the booked lookup on purpose: a slot
holding only a bonus appointment still reads as free.
"""

from dataclasses import dataclass
from enum import Enum
from zoneinfo import ZoneInfo

from .config import time_str_to_minutes, to_local_time_str


class SlotStatus(str, Enum):
    free = "free"
    booked = "booked"
    blocked = "blocked"


@dataclass(frozen=True)
class ClassifiedSlot:
    time: str
    status: SlotStatus
    appointment_id: int | None = None
    block_id: int | None = None


def booked_lookup(appointments: list, tz: ZoneInfo) -> dict[str, int]:
    """Map local "HH:MM" start → appointment id for confirmed regular appointments."""
    lookup: dict[str, int] = {}
    for appt in appointments:
        if appt.status != "CONFIRMED" or appt.is_bonus:
            continue
        lookup.setdefault(to_local_time_str(appt.start_time, tz), appt.id)
    return lookup


def find_block(blocks: list, time_str: str):
    """First block whose [start, end) contains time_str, or None."""
    minutes = time_str_to_minutes(time_str)
    for block in blocks:
        if time_str_to_minutes(block.start_time) <= minutes < time_str_to_minutes(block.end_time):
            return block
    return None


def classify(
    slots: list[str],
    appointments: list,
    blocks: list,
    tz: ZoneInfo,
) -> list[ClassifiedSlot]:
    """Classify slots in generator order. Booked takes precedence over blocked."""
    booked = booked_lookup(appointments, tz)

    result = []
    for time_str in slots:
        appointment_id = booked.get(time_str)
        if appointment_id is not None:
            result.append(ClassifiedSlot(time_str, SlotStatus.booked, appointment_id=appointment_id))
            continue

        block = find_block(blocks, time_str)
        if block is not None:
            result.append(ClassifiedSlot(time_str, SlotStatus.blocked, block_id=block.id))
            continue

        result.append(ClassifiedSlot(time_str, SlotStatus.free))

    return result
