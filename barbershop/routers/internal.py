# barbershop/routers/internal.py
"""
Internal API endpoints for trusted callers (cron, local workers).

Access: localhost only.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel

from ..deps import get_engine, unwrap
from ..services.availability import AvailabilityEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", tags=["internal"])

LOCAL_HOSTS = ("127.0.0.1", "localhost", "::1", None)


class ReminderSweepResponse(BaseModel):
    """Outcome of one reminder sweep."""
    day: date
    sent: int
    skipped: int
    failed: int


def require_local(request: Request) -> None:
    client_host = request.client.host if request.client else None
    if client_host not in LOCAL_HOSTS:
        logger.warning(f"Internal endpoint called from non-localhost: {client_host}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Internal endpoints are only accessible from localhost"
        )


@router.post(
    "/reminders",
    response_model=ReminderSweepResponse,
    dependencies=[Depends(require_local)],
)
def send_reminders(
    days_ahead: int = Query(0, ge=0),
    engine: AvailabilityEngine = Depends(get_engine),
):
    """
    Daily reminder sweep.

    Emits one reminder event per confirmed appointment on
    today + days_ahead (shop-local day).
    """
    return unwrap(engine.send_reminders(days_ahead))
