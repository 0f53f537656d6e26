# barbershop/schemas/day_overrides.py

from datetime import date as Date
from typing import Literal, Optional
from pydantic import BaseModel

from ..services.availability import Actor
from .common import UtcDatetime


class DayOverrideSet(BaseModel):
    actor: Actor
    state: Literal["OPEN", "CLOSED"]
    reason: Optional[str] = None


class DayOverrideRead(BaseModel):
    id: int

    day: Date
    state: str
    reason: Optional[str] = None

    created_at: Optional[UtcDatetime] = None

    model_config = {"from_attributes": True}
