# barbershop/schemas/customers.py

from typing import Optional
from pydantic import BaseModel, Field

from .appointments import AppointmentRead
from .common import UtcDatetime


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class CustomerRead(BaseModel):
    id: int

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    created_at: Optional[UtcDatetime] = None

    model_config = {"from_attributes": True}


class HistoryEntryRead(BaseModel):
    appointment: AppointmentRead
    can_cancel: bool

    model_config = {"from_attributes": True}


class CustomerHistoryResponse(BaseModel):
    customer_id: int
    upcoming: list[HistoryEntryRead]
    past: list[HistoryEntryRead]

    model_config = {"from_attributes": True}
