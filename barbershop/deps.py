# barbershop/deps.py

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from .database import get_db
from .services.availability import AvailabilityEngine, Rejection, get_booking_config
from .services.notifications import get_notifier


def get_engine(
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier),
) -> AvailabilityEngine:
    return AvailabilityEngine(db, get_booking_config(), notifier)


def unwrap(result):
    """Return the engine result, or raise the HTTP error matching a rejection."""
    if isinstance(result, Rejection):
        raise HTTPException(
            status_code=result.status_code,
            detail={"reason": result.reason.value, "message": result.detail},
        )
    return result
