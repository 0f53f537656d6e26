# barbershop/routers/slot_blocks.py

from datetime import date
from fastapi import APIRouter, Depends, Query

from ..deps import get_engine, unwrap
from ..schemas.slot_blocks import SlotBlockRead, SlotBlockToggle, SlotBlockToggleResponse
from ..services.availability import Actor, AvailabilityEngine

router = APIRouter(prefix="/slot_blocks", tags=["slot_blocks"])


@router.get("/", response_model=list[SlotBlockRead])
def list_slot_blocks(
    target_date: date = Query(..., alias="date"),
    engine: AvailabilityEngine = Depends(get_engine),
):
    return engine.list_slot_blocks(target_date)


@router.post("/toggle", response_model=SlotBlockToggleResponse)
def toggle_slot_block(
    data: SlotBlockToggle,
    engine: AvailabilityEngine = Depends(get_engine),
):
    """Block a free slot, or unblock a blocked one."""
    return unwrap(engine.toggle_slot_block(data.date, data.time, data.actor))


@router.delete("/")
def clear_slot_blocks(
    actor: Actor,
    target_date: date = Query(..., alias="date"),
    engine: AvailabilityEngine = Depends(get_engine),
):
    """Unblock every slot of a day."""
    deleted = unwrap(engine.clear_slot_blocks(target_date, actor))
    return {"date": target_date.isoformat(), "deleted": deleted}
