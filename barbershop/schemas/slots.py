"""
Pydantic schemas for slots API.
"""

from datetime import date as Date
from typing import Optional
from pydantic import BaseModel, Field

from ..services.availability import Actor, SlotStatus


class SlotRead(BaseModel):
    """A single classified slot."""
    time: str  # "HH:MM"
    status: SlotStatus
    appointment_id: Optional[int] = None
    block_id: Optional[int] = None

    model_config = {"from_attributes": True}


class DaySlotsResponse(BaseModel):
    """Classified slots for one day."""
    date: Date
    viewer: Actor
    day_status: str = Field(description="closed / standard / extraordinary")
    override_state: Optional[str] = None
    override_reason: Optional[str] = None
    slot_duration_minutes: int
    slots: list[SlotRead]

    model_config = {"from_attributes": True}


class SlotsDayStatus(BaseModel):
    """Status of a single day in calendar."""
    date: Date
    has_slots: bool
    free_slots_count: int = 0


class SlotsCalendarResponse(BaseModel):
    """Response with calendar of available days."""
    start_date: Date
    end_date: Date
    days: list[SlotsDayStatus]

    # Metadata
    horizon_days: int
    slot_duration_minutes: int
