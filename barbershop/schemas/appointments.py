# barbershop/schemas/appointments.py

from datetime import date as Date
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..services.availability import Actor
from ..services.availability.config import is_valid_time_str
from .common import UtcDatetime


class AppointmentCreate(BaseModel):
    date: Date
    time: str = Field(description="Shop-local start time, HH:MM")

    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    notes: Optional[str] = None

    is_bonus: bool = False
    created_by: Actor = Actor.customer
    customer_id: Optional[int] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not is_valid_time_str(v):
            raise ValueError("Time must be in HH:MM format")
        return v


class AppointmentUpdate(BaseModel):
    actor: Actor

    date: Optional[Date] = None
    time: Optional[str] = None

    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    notes: Optional[str] = None
    is_bonus: Optional[bool] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_time_str(v):
            raise ValueError("Time must be in HH:MM format")
        return v


class AppointmentCancel(BaseModel):
    actor: Actor
    customer_id: Optional[int] = None


class AppointmentRead(BaseModel):
    id: int

    start_time: UtcDatetime
    end_time: UtcDatetime

    status: str
    is_bonus: bool
    created_by: str

    customer_id: Optional[int] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    notes: Optional[str] = None

    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = {"from_attributes": True}


class AppointmentResult(BaseModel):
    """Committed booking or cancellation; notified=False is a soft warning."""
    appointment: AppointmentRead
    notified: Optional[bool] = None
    warning: Optional[str] = None
