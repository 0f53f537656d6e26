# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.exceptions import RedisError

from .config import settings
from .database import engine
from .models import Base
from .redis_client import redis_client
from .routers import (
    appointments,
    customers,
    day_overrides,
    internal,
    shop_settings,
    slot_blocks,
    slots,
)

logging.basicConfig(
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    level=settings.log_level,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield


app = FastAPI(title="Barbershop Booking API", lifespan=lifespan)

app.include_router(shop_settings.router)
app.include_router(slots.router)
app.include_router(appointments.router)
app.include_router(customers.router)
app.include_router(day_overrides.router)
app.include_router(slot_blocks.router)
app.include_router(internal.router)


@app.get("/health")
def health():
    try:
        redis_ok = bool(redis_client.ping())
    except RedisError:
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
