# barbershop/routers/customers.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_engine, unwrap
from ..models import Customers as DBCustomers
from ..schemas.customers import (
    CustomerCreate,
    CustomerHistoryResponse,
    CustomerRead,
)
from ..services.availability import AvailabilityEngine

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("/", response_model=list[CustomerRead])
def list_customers(search: str | None = None, db: Session = Depends(get_db)):
    query = db.query(DBCustomers)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            DBCustomers.name.ilike(pattern),
            DBCustomers.email.ilike(pattern),
            DBCustomers.phone.ilike(pattern),
        ))
    return query.order_by(DBCustomers.name).all()


@router.get("/{id}", response_model=CustomerRead)
def get_customer(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBCustomers, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(data: CustomerCreate, db: Session = Depends(get_db)):
    obj = DBCustomers(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.get("/{id}/appointments", response_model=CustomerHistoryResponse)
def get_customer_appointments(id: int, engine: AvailabilityEngine = Depends(get_engine)):
    """Upcoming and past appointments, with the cancel-allowed flag."""
    history = unwrap(engine.list_customer_appointments(id))
    return CustomerHistoryResponse.model_validate(history)
