# barbershop/schemas/shop_settings.py

import json
from typing import Optional
from pydantic import BaseModel, field_validator

from ..services.availability import Actor
from ..services.availability.config import WEEKDAY_NAMES, is_valid_time_str, time_str_to_minutes
from .common import UtcDatetime


class ShopSettingsUpdate(BaseModel):
    actor: Actor

    shop_name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email_from: Optional[str] = None

    # {"mon": [["09:00", "13:00"], ["15:00", "19:00"]], "sun": [], ...}
    open_hours: dict[str, list[tuple[str, str]]]

    @field_validator("open_hours")
    @classmethod
    def validate_open_hours(cls, v: dict) -> dict:
        for day, ranges in v.items():
            if day not in WEEKDAY_NAMES:
                raise ValueError(f"Unknown weekday '{day}', expected one of {WEEKDAY_NAMES}")
            for start, end in ranges:
                if not is_valid_time_str(start) or not is_valid_time_str(end):
                    raise ValueError(f"{day}: times must be in HH:MM format")
                if time_str_to_minutes(start) >= time_str_to_minutes(end):
                    raise ValueError(f"{day}: range start must be before its end")

            # Ranges of a day are stored in order and must not overlap
            ranges.sort(key=lambda r: time_str_to_minutes(r[0]))
            for (_, prev_end), (start, _) in zip(ranges, ranges[1:]):
                if time_str_to_minutes(start) < time_str_to_minutes(prev_end):
                    raise ValueError(f"{day}: ranges {prev_end} and {start} overlap")
        return v


class ShopSettingsRead(BaseModel):
    id: int

    shop_name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email_from: Optional[str] = None
    open_hours: dict[str, list[tuple[str, str]]]

    updated_at: Optional[UtcDatetime] = None

    model_config = {"from_attributes": True}

    @field_validator("open_hours", mode="before")
    @classmethod
    def decode_open_hours(cls, v):
        if isinstance(v, str):
            return json.loads(v) if v else {}
        return v
