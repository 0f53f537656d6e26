# barbershop/schemas/common.py

from datetime import datetime
from typing import Annotated

from pydantic import BeforeValidator

from ..services.availability.config import from_db_instant


def _attach_utc(v):
    # Stored instants are naive UTC text
    if isinstance(v, str):
        return from_db_instant(v)
    return v


UtcDatetime = Annotated[datetime, BeforeValidator(_attach_utc)]
