# barbershop/routers/day_overrides.py

from datetime import date
from fastapi import APIRouter, Depends, status

from ..deps import get_engine, unwrap
from ..models import DayOverrides as DBDayOverrides
from ..schemas.day_overrides import DayOverrideRead, DayOverrideSet
from ..services.availability import Actor, AvailabilityEngine

router = APIRouter(prefix="/day_overrides", tags=["day_overrides"])


@router.get("/", response_model=list[DayOverrideRead])
def list_day_overrides(
    start_date: date | None = None,
    end_date: date | None = None,
    engine: AvailabilityEngine = Depends(get_engine),
):
    query = engine.db.query(DBDayOverrides)
    if start_date is not None:
        query = query.filter(DBDayOverrides.day >= start_date.isoformat())
    if end_date is not None:
        query = query.filter(DBDayOverrides.day <= end_date.isoformat())
    return query.order_by(DBDayOverrides.day).all()


@router.put("/{day}", response_model=DayOverrideRead)
def set_day_override(
    day: date,
    data: DayOverrideSet,
    engine: AvailabilityEngine = Depends(get_engine),
):
    """Force a day OPEN or CLOSED (replaces any previous override)."""
    return unwrap(engine.set_day_override(day, data.state, data.actor, reason=data.reason))


@router.delete("/{day}", status_code=status.HTTP_204_NO_CONTENT)
def clear_day_override(
    day: date,
    actor: Actor,
    engine: AvailabilityEngine = Depends(get_engine),
):
    unwrap(engine.clear_day_override(day, actor))
