# barbershop/routers/slots.py
"""
Slots API endpoints.

GET /slots/day      - Classified slots of one day (customer or owner view)
GET /slots/calendar - Free-slot counts for a range of days
"""

from datetime import date, timedelta
from fastapi import APIRouter, Depends, Query

from ..deps import get_engine
from ..schemas.slots import (
    DaySlotsResponse,
    SlotRead,
    SlotsCalendarResponse,
    SlotsDayStatus,
)
from ..services.availability import Actor, AvailabilityEngine
from ..services.availability.config import utcnow


router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/day", response_model=DaySlotsResponse)
def get_slots_day(
    target_date: date = Query(..., alias="date"),
    viewer: Actor = Actor.customer,
    engine: AvailabilityEngine = Depends(get_engine),
):
    """Classified slots for a day. An empty list means the shop is closed."""
    day = engine.get_day_slots(target_date, viewer)

    return DaySlotsResponse(
        date=day.date,
        viewer=viewer,
        day_status=day.day_status,
        override_state=day.override_state,
        override_reason=day.override_reason,
        slot_duration_minutes=engine.config.slot_duration_minutes,
        slots=[SlotRead.model_validate(s) for s in day.slots],
    )


@router.get("/calendar", response_model=SlotsCalendarResponse)
def get_slots_calendar(
    start_date: date | None = None,
    end_date: date | None = None,
    viewer: Actor = Actor.customer,
    engine: AvailabilityEngine = Depends(get_engine),
):
    """
    Free-slot counts per day.

    The customer calendar is clamped to [today, today + horizon], the owner
    calendar covers whatever range is asked for.
    """
    config = engine.config
    now = utcnow()

    today = now.astimezone(config.tz).date()
    if start_date is None:
        start_date = today
    if end_date is None:
        end_date = start_date + timedelta(days=config.horizon_days)

    if viewer == Actor.customer:
        if start_date < today:
            start_date = today
        if end_date > today + timedelta(days=config.horizon_days):
            end_date = today + timedelta(days=config.horizon_days)
    if end_date < start_date:
        end_date = start_date

    dates = []
    current = start_date
    while current <= end_date:
        dates.append(current)
        current += timedelta(days=1)

    counts = engine.count_free_slots(dates, viewer, now)

    return SlotsCalendarResponse(
        start_date=start_date,
        end_date=end_date,
        days=[
            SlotsDayStatus(date=dt, has_slots=counts[dt] > 0, free_slots_count=counts[dt])
            for dt in dates
        ],
        horizon_days=config.horizon_days,
        slot_duration_minutes=config.slot_duration_minutes,
    )
