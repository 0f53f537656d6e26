# barbershop/services/availability/__init__.py
"""
Availability engine.

schedule   → open-hour ranges for a date (weekly template + day override)
generator  → fixed-stride slot starts
classifier → free / booked / blocked per slot
engine     → day view and every booking mutation
"""

from .config import BookingConfig, get_booking_config
from .schedule import resolve_day_ranges, day_status
from .generator import generate_slots
from .classifier import ClassifiedSlot, SlotStatus, classify
from .results import (
    Actor,
    BlockToggled,
    Committed,
    Contact,
    CustomerHistory,
    DaySlots,
    Deleted,
    Rejection,
    RejectionReason,
    ReminderSweep,
)
from .engine import AvailabilityEngine

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "resolve_day_ranges",
    "day_status",
    "generate_slots",
    "ClassifiedSlot",
    "SlotStatus",
    "classify",
    "Actor",
    "BlockToggled",
    "Committed",
    "Contact",
    "CustomerHistory",
    "DaySlots",
    "Deleted",
    "Rejection",
    "RejectionReason",
    "ReminderSweep",
    "AvailabilityEngine",
]
