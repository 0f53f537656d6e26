# barbershop/schemas/slot_blocks.py

from datetime import date as Date
from typing import Optional
from pydantic import BaseModel, field_validator

from ..services.availability import Actor
from ..services.availability.config import is_valid_time_str
from .common import UtcDatetime


class SlotBlockToggle(BaseModel):
    actor: Actor
    date: Date
    time: str

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not is_valid_time_str(v):
            raise ValueError("Time must be in HH:MM format")
        return v


class SlotBlockToggleResponse(BaseModel):
    day: Date
    start_time: str
    end_time: str
    blocked: bool

    model_config = {"from_attributes": True}


class SlotBlockRead(BaseModel):
    id: int

    day: Date
    start_time: str
    end_time: str

    created_at: Optional[UtcDatetime] = None

    model_config = {"from_attributes": True}
