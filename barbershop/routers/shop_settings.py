# barbershop/routers/shop_settings.py

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import ShopSettings as DBShopSettings
from ..schemas.shop_settings import ShopSettingsRead, ShopSettingsUpdate
from ..services.availability import Actor
from ..services.availability.config import to_db_instant, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shop_settings", tags=["shop_settings"])


@router.get("/", response_model=ShopSettingsRead)
def get_shop_settings(db: Session = Depends(get_db)):
    obj = db.query(DBShopSettings).order_by(DBShopSettings.id).first()
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.put("/", response_model=ShopSettingsRead)
def put_shop_settings(data: ShopSettingsUpdate, db: Session = Depends(get_db)):
    """Replace the single settings row (weekly open hours included)."""
    if data.actor != Actor.owner:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the owner can change shop settings",
        )

    obj = db.query(DBShopSettings).order_by(DBShopSettings.id).first()
    if obj is None:
        obj = DBShopSettings()
        db.add(obj)

    obj.shop_name = data.shop_name
    obj.address = data.address
    obj.phone = data.phone
    obj.email_from = data.email_from
    obj.open_hours = json.dumps(
        {day: [list(r) for r in ranges] for day, ranges in data.open_hours.items()}
    )
    obj.updated_at = to_db_instant(utcnow())

    db.commit()
    db.refresh(obj)

    logger.info("Shop settings updated")
    return obj
