# barbershop/services/availability/results.py
"""
Typed outcomes returned by the availability engine.

Domain rejections are values, not exceptions: routers turn them into
HTTP errors, other callers can branch on `reason`.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .classifier import ClassifiedSlot


class Actor(str, Enum):
    customer = "customer"
    owner = "owner"


class RejectionReason(str, Enum):
    SLOT_TAKEN = "slot_taken"
    SLOT_UNAVAILABLE = "slot_unavailable"
    SLOT_OCCUPIED = "slot_occupied"
    CUTOFF_EXCEEDED = "cutoff_exceeded"
    NOT_FOUND = "not_found"
    ALREADY_CANCELED = "already_canceled"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation"


HTTP_STATUS = {
    RejectionReason.SLOT_TAKEN: 409,
    RejectionReason.SLOT_UNAVAILABLE: 409,
    RejectionReason.SLOT_OCCUPIED: 409,
    RejectionReason.CUTOFF_EXCEEDED: 409,
    RejectionReason.NOT_FOUND: 404,
    RejectionReason.ALREADY_CANCELED: 409,
    RejectionReason.FORBIDDEN: 403,
    RejectionReason.VALIDATION: 422,
}


@dataclass(frozen=True)
class Rejection:
    reason: RejectionReason
    detail: str

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.reason]


@dataclass(frozen=True)
class Contact:
    name: str | None = None
    email: str | None = None
    phone: str | None = None


@dataclass
class Committed:
    """
    A committed appointment mutation.

    notified is None when no notification was attempted, False when the
    notification failed (soft warning, the mutation stands).
    """
    appointment: object
    notified: bool | None = None


@dataclass(frozen=True)
class Deleted:
    id: int


@dataclass(frozen=True)
class BlockToggled:
    day: date
    start_time: str
    end_time: str
    blocked: bool


@dataclass
class DaySlots:
    date: date
    day_status: str
    slots: list[ClassifiedSlot]
    override_state: str | None = None
    override_reason: str | None = None


@dataclass(frozen=True)
class HistoryEntry:
    appointment: object
    can_cancel: bool


@dataclass
class CustomerHistory:
    customer_id: int
    upcoming: list[HistoryEntry] = field(default_factory=list)
    past: list[HistoryEntry] = field(default_factory=list)


@dataclass
class ReminderSweep:
    day: date
    sent: int = 0
    skipped: int = 0
    failed: int = 0
