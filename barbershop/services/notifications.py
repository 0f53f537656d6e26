"""
barbershop/services/notifications.py

Notification collaborator: pushes appointment events to Redis for the
external email consumer.

Queue:
- events:p2p — one event per appointment notification

Delivery is best-effort. Every call returns True/False and never raises,
so a broken Redis can not undo a booking or a cancellation.
"""

import json
import time
import logging

from redis import Redis
from redis.exceptions import RedisError

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict, redis: Redis | None = None) -> bool:
    """
    Emit a p2p event (instant delivery).

    Pushed to Redis list `events:p2p` for the consumer loop.
    """
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    client = redis if redis is not None else redis_client
    try:
        client.rpush(P2P_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
        return True
    except RedisError as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
        return False


class RedisNotifier:
    """Email notifications for appointments, delivered via the event queue."""

    def __init__(self, redis: Redis | None = None):
        self.redis = redis

    def send_confirmation(self, appointment_id: int) -> bool:
        return emit_event("appointment_confirmed", {"appointment_id": appointment_id}, self.redis)

    def send_cancellation(self, appointment_id: int) -> bool:
        return emit_event("appointment_canceled", {"appointment_id": appointment_id}, self.redis)

    def send_reminder(self, appointment_id: int) -> bool:
        return emit_event("appointment_reminder", {"appointment_id": appointment_id}, self.redis)


# FastAPI dependency
def get_notifier() -> RedisNotifier:
    return RedisNotifier()
