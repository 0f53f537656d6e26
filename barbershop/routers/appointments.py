# barbershop/routers/appointments.py

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..deps import get_engine, unwrap
from ..models import Appointments as DBAppointments
from ..schemas.appointments import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentRead,
    AppointmentResult,
    AppointmentUpdate,
)
from ..services.availability import Actor, AvailabilityEngine, Committed, Contact

router = APIRouter(prefix="/appointments", tags=["appointments"])

NOTIFICATION_WARNING = "Saved, but the email notification could not be sent"


def _result(committed: Committed) -> AppointmentResult:
    return AppointmentResult(
        appointment=AppointmentRead.model_validate(committed.appointment),
        notified=committed.notified,
        warning=NOTIFICATION_WARNING if committed.notified is False else None,
    )


@router.get("/", response_model=list[AppointmentRead])
def list_appointments(
    target_date: date = Query(..., alias="date"),
    engine: AvailabilityEngine = Depends(get_engine),
):
    """Every appointment of a day, canceled and bonus ones included."""
    return engine.list_day_appointments(target_date)


@router.get("/{id}", response_model=AppointmentRead)
def get_appointment(id: int, engine: AvailabilityEngine = Depends(get_engine)):
    obj = engine.db.get(DBAppointments, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=AppointmentResult, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    engine: AvailabilityEngine = Depends(get_engine),
):
    committed = unwrap(engine.book(
        target_date=data.date,
        time_str=data.time,
        contact=Contact(data.client_name, data.client_email, data.client_phone),
        is_bonus=data.is_bonus,
        created_by=data.created_by,
        customer_id=data.customer_id,
        notes=data.notes,
    ))
    return _result(committed)


@router.patch("/{id}", response_model=AppointmentRead)
def update_appointment(
    id: int,
    data: AppointmentUpdate,
    engine: AvailabilityEngine = Depends(get_engine),
):
    fields = data.model_fields_set
    contact = None
    if fields & {"client_name", "client_email", "client_phone"}:
        contact = Contact(data.client_name, data.client_email, data.client_phone)

    committed = unwrap(engine.update(
        id,
        data.actor,
        target_date=data.date,
        time_str=data.time,
        contact=contact,
        notes=data.notes,
        is_bonus=data.is_bonus,
    ))
    return committed.appointment


@router.post("/{id}/cancel", response_model=AppointmentResult)
def cancel_appointment(
    id: int,
    data: AppointmentCancel,
    engine: AvailabilityEngine = Depends(get_engine),
):
    committed = unwrap(engine.cancel(id, data.actor, customer_id=data.customer_id))
    return _result(committed)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    id: int,
    actor: Actor,
    engine: AvailabilityEngine = Depends(get_engine),
):
    unwrap(engine.delete(id, actor))
