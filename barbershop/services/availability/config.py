# barbershop/services/availability/config.py
"""
Booking configuration for the availability engine.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from ...config import settings


WEEKDAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

# Naive UTC ISO text, as stored in appointments.start_time / end_time
INSTANT_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the availability engine.

    Attributes:
        slot_duration_minutes: Length of one slot and of every appointment
        cancellation_cutoff_hours: Minimum lead time for a customer to cancel
        allow_overrun: Whether the last slot of a range may end after closing
        fallback_weekday: Template hours for an extraordinary opening
        timezone: Shop timezone used for every HH:MM on the wire
        horizon_days: How many days ahead customers may book
    """
    slot_duration_minutes: int = 45
    cancellation_cutoff_hours: int = 24
    allow_overrun: bool = True
    fallback_weekday: str = "mon"
    timezone: str = "Europe/Rome"
    horizon_days: int = 60

    def __post_init__(self):
        if not 5 <= self.slot_duration_minutes <= 240:
            raise ValueError(
                f"slot_duration_minutes must be between 5 and 240, got {self.slot_duration_minutes}"
            )
        if self.fallback_weekday not in WEEKDAY_NAMES:
            raise ValueError(f"fallback_weekday must be one of {WEEKDAY_NAMES}, got {self.fallback_weekday}")
        if self.cancellation_cutoff_hours < 0:
            raise ValueError("cancellation_cutoff_hours cannot be negative")

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def slot_delta(self) -> timedelta:
        return timedelta(minutes=self.slot_duration_minutes)

    @property
    def cutoff_delta(self) -> timedelta:
        return timedelta(hours=self.cancellation_cutoff_hours)


@lru_cache
def get_booking_config() -> BookingConfig:
    """Build the engine configuration from application settings (singleton)."""
    return BookingConfig(
        slot_duration_minutes=settings.slot_duration_minutes,
        cancellation_cutoff_hours=settings.cancellation_cutoff_hours,
        allow_overrun=settings.allow_overrun,
        fallback_weekday=settings.fallback_weekday,
        timezone=settings.shop_timezone,
        horizon_days=settings.horizon_days,
    )


# ── Time helpers ─────────────────────────────────────────────────────────


def is_valid_time_str(value: str) -> bool:
    return bool(TIME_RE.match(value or ""))


def time_str_to_minutes(value: str) -> int:
    """
    "HH:MM" → minutes since midnight.

    "24:00" is accepted as the end of the day.
    """
    hour, minute = value.strip().split(":")[:2]
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def local_instant(target_date: date, time_str: str, tz: ZoneInfo) -> datetime:
    """Shop-local date + "HH:MM" → aware UTC datetime."""
    days, minutes = divmod(time_str_to_minutes(time_str), 24 * 60)
    wall = datetime.combine(
        target_date + timedelta(days=days),
        time(minutes // 60, minutes % 60),
        tzinfo=tz,
    )
    return wall.astimezone(timezone.utc)


def to_db_instant(dt: datetime) -> str:
    """Aware datetime → stored UTC text."""
    return dt.astimezone(timezone.utc).strftime(INSTANT_FORMAT)


def from_db_instant(value: str) -> datetime:
    """Stored UTC text → aware UTC datetime."""
    dt = datetime.fromisoformat(str(value).replace("Z", ""))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_local_time_str(value: str, tz: ZoneInfo) -> str:
    """Stored UTC text → shop-local "HH:MM"."""
    return from_db_instant(value).astimezone(tz).strftime("%H:%M")


def to_local_date(value: str, tz: ZoneInfo) -> date:
    return from_db_instant(value).astimezone(tz).date()


def day_bounds(target_date: date, tz: ZoneInfo) -> tuple[str, str]:
    """Stored-format bounds [start, end) of a shop-local calendar day."""
    start = datetime.combine(target_date, datetime.min.time(), tzinfo=tz)
    end = datetime.combine(target_date + timedelta(days=1), datetime.min.time(), tzinfo=tz)
    return to_db_instant(start), to_db_instant(end)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
