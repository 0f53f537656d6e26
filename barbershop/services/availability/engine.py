# barbershop/services/availability/engine.py
"""
Availability engine: day slots for the booking pages and the only place
where appointments, slot blocks and day overrides are written.

Flow: shop_settings + day_overrides → raw slots → classified slots → mutation.

Invariants enforced here:
✓ two CONFIRMED regular appointments never overlap (re-checked against
  storage at commit time, backed by a partial unique index)
✓ customers cancel only up to `cancellation_cutoff_hours` before the start
✓ owner-only operations reject any other actor
✓ notification failures never roll back the mutation
"""

import logging
from datetime import date, datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Appointments, Customers, DayOverrides, ShopSettings, SlotBlocks
from ..notifications import RedisNotifier
from .classifier import ClassifiedSlot, SlotStatus, classify, find_block
from .config import (
    BookingConfig,
    get_booking_config,
    day_bounds,
    from_db_instant,
    is_valid_time_str,
    local_instant,
    minutes_to_time_str,
    time_str_to_minutes,
    to_db_instant,
    utcnow,
)
from .generator import generate_slots
from .results import (
    Actor,
    BlockToggled,
    Committed,
    Contact,
    CustomerHistory,
    DaySlots,
    Deleted,
    HistoryEntry,
    Rejection,
    RejectionReason,
    ReminderSweep,
)
from .schedule import (
    OVERRIDE_CLOSED,
    OVERRIDE_OPEN,
    day_status,
    parse_open_hours,
    resolve_day_ranges,
)

logger = logging.getLogger(__name__)

CONFIRMED = "CONFIRMED"
CANCELED = "CANCELED"


def _owner_only(actor: Actor, action: str) -> Rejection | None:
    if Actor(actor) != Actor.owner:
        return Rejection(RejectionReason.FORBIDDEN, f"Only the owner can {action}")
    return None


class AvailabilityEngine:
    """One engine per request: wraps a DB session, config and notifier."""

    def __init__(
        self,
        db: Session,
        config: BookingConfig | None = None,
        notifier=None,
    ):
        self.db = db
        self.config = config or get_booking_config()
        self.notifier = notifier if notifier is not None else RedisNotifier()

    # ── Day view ─────────────────────────────────────────────────────────

    def get_day_slots(
        self,
        target_date: date,
        viewer: Actor = Actor.customer,
        now: datetime | None = None,
    ) -> DaySlots:
        """
        Classified slots for a day.

        Customer view: future slots only, nothing beyond the booking
        horizon, no appointment/block references.
        Owner view: every slot of the day, past ones included.
        """
        viewer = Actor(viewer)
        tz = self.config.tz

        schedule = self._schedule()
        override = self._override(target_date)
        ranges = resolve_day_ranges(schedule, override, target_date, self.config.fallback_weekday)

        if viewer == Actor.customer:
            now = now or utcnow()
            if target_date > self._horizon_end(now):
                ranges = []
            raw = generate_slots(
                ranges,
                self.config.slot_duration_minutes,
                self.config.allow_overrun,
                target_date=target_date,
                now=now,
                tz=tz,
            )
        else:
            raw = generate_slots(
                ranges,
                self.config.slot_duration_minutes,
                self.config.allow_overrun,
            )

        slots = classify(raw, self._appointments_on(target_date), self._blocks(target_date), tz)
        if viewer == Actor.customer:
            slots = [ClassifiedSlot(s.time, s.status) for s in slots]

        return DaySlots(
            date=target_date,
            day_status=day_status(schedule, override, target_date),
            slots=slots,
            override_state=override.state if override else None,
            override_reason=override.reason if override else None,
        )

    def count_free_slots(
        self,
        dates: list[date],
        viewer: Actor = Actor.customer,
        now: datetime | None = None,
    ) -> dict[date, int]:
        now = now or utcnow()
        counts = {}
        for dt in dates:
            day = self.get_day_slots(dt, viewer, now)
            counts[dt] = sum(1 for s in day.slots if s.status == SlotStatus.free)
        return counts

    def list_day_appointments(self, target_date: date) -> list[Appointments]:
        return self._appointments_on(target_date)

    # ── Appointments ─────────────────────────────────────────────────────

    def book(
        self,
        target_date: date,
        time_str: str,
        contact: Contact | None = None,
        is_bonus: bool = False,
        created_by: Actor = Actor.customer,
        customer_id: int | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Committed | Rejection:
        """
        Create a CONFIRMED appointment at target_date / time_str.

        Steps:
        1. Validate input and actor permissions
        2. Customers may only take a slot their day view offers as free
        3. Re-check storage for an overlapping confirmed regular appointment
        4. Insert (the partial unique index catches a lost race)
        5. Send the confirmation (best-effort)
        """
        if not is_valid_time_str(time_str):
            return Rejection(RejectionReason.VALIDATION, "Time must be in HH:MM format")

        created_by = Actor(created_by)
        if is_bonus and created_by != Actor.owner:
            return Rejection(RejectionReason.FORBIDDEN, "Only the owner can create bonus appointments")

        contact = contact or Contact()
        if customer_id is not None:
            customer = self.db.get(Customers, customer_id)
            if customer is None:
                return Rejection(RejectionReason.NOT_FOUND, "Customer not found")
            contact = Contact(
                name=contact.name or customer.name,
                email=contact.email or customer.email,
                phone=contact.phone or customer.phone,
            )

        now = now or utcnow()
        start = local_instant(target_date, time_str, self.config.tz)
        end = start + self.config.slot_delta
        start_s, end_s = to_db_instant(start), to_db_instant(end)

        if created_by == Actor.customer:
            offered = {
                s.time: s.status
                for s in self.get_day_slots(target_date, Actor.customer, now).slots
            }
            status = offered.get(time_str)
            if status is None or status == SlotStatus.blocked:
                logger.info(f"Booking refused: {target_date} {time_str} is not offered to customers")
                return Rejection(RejectionReason.SLOT_UNAVAILABLE, "This time is not available for booking")

        if not is_bonus:
            clash = self._find_overlapping(start_s, end_s)
            if clash is not None:
                logger.info(
                    f"Booking refused: {target_date} {time_str} overlaps appointment {clash.id}"
                )
                return Rejection(RejectionReason.SLOT_TAKEN, "This slot has just been booked")

        now_s = to_db_instant(now)
        appt = Appointments(
            start_time=start_s,
            end_time=end_s,
            status=CONFIRMED,
            is_bonus=1 if is_bonus else 0,
            created_by=created_by.value,
            customer_id=customer_id,
            client_name=contact.name,
            client_email=contact.email,
            client_phone=contact.phone,
            notes=notes,
            created_at=now_s,
            updated_at=now_s,
        )
        self.db.add(appt)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Booking refused: {target_date} {time_str} lost the insert race")
            return Rejection(RejectionReason.SLOT_TAKEN, "This slot has just been booked")
        self.db.refresh(appt)

        logger.info(
            f"Appointment {appt.id} booked for {target_date} {time_str} "
            f"by {created_by.value}{' (bonus)' if is_bonus else ''}"
        )
        notified = self._notify("send_confirmation", appt.id)
        return Committed(appt, notified)

    def update(
        self,
        appointment_id: int,
        actor: Actor,
        target_date: date | None = None,
        time_str: str | None = None,
        contact: Contact | None = None,
        notes: str | None = None,
        is_bonus: bool | None = None,
    ) -> Committed | Rejection:
        """Owner edit: move, change contact details, notes or the bonus flag."""
        rejection = _owner_only(actor, "edit appointments")
        if rejection:
            return rejection

        appt = self.db.get(Appointments, appointment_id)
        if appt is None:
            return Rejection(RejectionReason.NOT_FOUND, "Appointment not found")

        if time_str is not None and not is_valid_time_str(time_str):
            return Rejection(RejectionReason.VALIDATION, "Time must be in HH:MM format")

        tz = self.config.tz
        current = from_db_instant(appt.start_time).astimezone(tz)
        new_date = target_date or current.date()
        new_time = time_str or current.strftime("%H:%M")
        start = local_instant(new_date, new_time, tz)
        start_s = to_db_instant(start)
        end_s = to_db_instant(start + self.config.slot_delta)
        bonus = int(is_bonus) if is_bonus is not None else appt.is_bonus

        if appt.status == CONFIRMED and not bonus:
            clash = self._find_overlapping(start_s, end_s, exclude_id=appt.id)
            if clash is not None:
                return Rejection(RejectionReason.SLOT_TAKEN, "Another appointment holds this slot")

        appt.start_time = start_s
        appt.end_time = end_s
        appt.is_bonus = bonus
        if contact is not None:
            appt.client_name = contact.name
            appt.client_email = contact.email
            appt.client_phone = contact.phone
        if notes is not None:
            appt.notes = notes
        appt.updated_at = to_db_instant(utcnow())

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return Rejection(RejectionReason.SLOT_TAKEN, "Another appointment holds this slot")
        self.db.refresh(appt)

        logger.info(f"Appointment {appt.id} updated to {new_date} {new_time}")
        return Committed(appt)

    def cancel(
        self,
        appointment_id: int,
        actor: Actor,
        customer_id: int | None = None,
        now: datetime | None = None,
    ) -> Committed | Rejection:
        """
        CONFIRMED → CANCELED.

        The owner can always cancel. A customer can cancel only while
        now <= start - cutoff, and only their own appointment when
        customer_id is given.
        """
        actor = Actor(actor)
        appt = self.db.get(Appointments, appointment_id)
        if appt is None:
            return Rejection(RejectionReason.NOT_FOUND, "Appointment not found")

        if appt.status == CANCELED:
            return Rejection(RejectionReason.ALREADY_CANCELED, "Appointment is already canceled")

        if actor == Actor.customer:
            if customer_id is not None and appt.customer_id != customer_id:
                return Rejection(RejectionReason.FORBIDDEN, "Appointment belongs to another customer")

            now = now or utcnow()
            if now > from_db_instant(appt.start_time) - self.config.cutoff_delta:
                logger.info(f"Cancellation of appointment {appt.id} refused: inside the cutoff window")
                return Rejection(
                    RejectionReason.CUTOFF_EXCEEDED,
                    f"Appointments can not be canceled in the {self.config.cancellation_cutoff_hours} hours "
                    "before they start. Please contact the shop.",
                )

        appt.status = CANCELED
        appt.updated_at = to_db_instant(now or utcnow())
        self.db.commit()
        self.db.refresh(appt)

        logger.info(f"Appointment {appt.id} canceled by {actor.value}")
        notified = self._notify("send_cancellation", appt.id)
        return Committed(appt, notified)

    def delete(self, appointment_id: int, actor: Actor) -> Deleted | Rejection:
        """Owner-only hard delete. Irreversible, no notification."""
        rejection = _owner_only(actor, "delete appointments")
        if rejection:
            return rejection

        appt = self.db.get(Appointments, appointment_id)
        if appt is None:
            return Rejection(RejectionReason.NOT_FOUND, "Appointment not found")

        self.db.delete(appt)
        self.db.commit()

        logger.info(f"Appointment {appointment_id} deleted")
        return Deleted(appointment_id)

    # ── Slot blocks ──────────────────────────────────────────────────────

    def toggle_slot_block(
        self,
        target_date: date,
        time_str: str,
        actor: Actor,
    ) -> BlockToggled | Rejection:
        """
        Unblock the slot if a block covers time_str, block it otherwise.

        Blocking a slot that holds a confirmed regular appointment is refused.
        """
        rejection = _owner_only(actor, "block slots")
        if rejection:
            return rejection

        if not is_valid_time_str(time_str):
            return Rejection(RejectionReason.VALIDATION, "Time must be in HH:MM format")

        day_str = target_date.isoformat()
        existing = find_block(self._blocks(target_date), time_str)
        if existing is not None:
            toggled = BlockToggled(target_date, existing.start_time, existing.end_time, blocked=False)
            self.db.delete(existing)
            self.db.commit()
            logger.info(f"Slot {day_str} {toggled.start_time}-{toggled.end_time} unblocked")
            return toggled

        end_min = min(time_str_to_minutes(time_str) + self.config.slot_duration_minutes, 24 * 60)
        end_str = minutes_to_time_str(end_min)

        tz = self.config.tz
        start_s = to_db_instant(local_instant(target_date, time_str, tz))
        end_s = to_db_instant(local_instant(target_date, end_str, tz))
        clash = self._find_overlapping(start_s, end_s)
        if clash is not None:
            return Rejection(RejectionReason.SLOT_OCCUPIED, "Slot already booked")

        self.db.add(SlotBlocks(day=day_str, start_time=time_str, end_time=end_str))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return Rejection(RejectionReason.VALIDATION, "Slot block already exists")

        logger.info(f"Slot {day_str} {time_str}-{end_str} blocked")
        return BlockToggled(target_date, time_str, end_str, blocked=True)

    def clear_slot_blocks(self, target_date: date, actor: Actor) -> int | Rejection:
        """Remove every block of the day, returns how many were removed."""
        rejection = _owner_only(actor, "unblock slots")
        if rejection:
            return rejection

        deleted = (
            self.db.query(SlotBlocks)
            .filter(SlotBlocks.day == target_date.isoformat())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"{deleted} slot block(s) removed on {target_date}")
        return deleted

    def list_slot_blocks(self, target_date: date) -> list[SlotBlocks]:
        return self._blocks(target_date)

    # ── Day overrides ────────────────────────────────────────────────────

    def set_day_override(
        self,
        target_date: date,
        state: str,
        actor: Actor,
        reason: str | None = None,
    ) -> DayOverrides | Rejection:
        """Upsert the single override of target_date."""
        rejection = _owner_only(actor, "open or close days")
        if rejection:
            return rejection

        if state not in (OVERRIDE_OPEN, OVERRIDE_CLOSED):
            return Rejection(RejectionReason.VALIDATION, "State must be OPEN or CLOSED")

        override = self._override(target_date)
        if override is None:
            override = DayOverrides(day=target_date.isoformat(), state=state, reason=reason)
            self.db.add(override)
        else:
            override.state = state
            override.reason = reason
        self.db.commit()
        self.db.refresh(override)

        logger.info(f"Day {target_date} overridden as {state}")
        return override

    def clear_day_override(self, target_date: date, actor: Actor) -> Deleted | Rejection:
        rejection = _owner_only(actor, "open or close days")
        if rejection:
            return rejection

        override = self._override(target_date)
        if override is None:
            return Rejection(RejectionReason.NOT_FOUND, "No override for this day")

        override_id = override.id
        self.db.delete(override)
        self.db.commit()

        logger.info(f"Override removed for {target_date}")
        return Deleted(override_id)

    # ── Customers ────────────────────────────────────────────────────────

    def list_customer_appointments(
        self,
        customer_id: int,
        now: datetime | None = None,
    ) -> CustomerHistory | Rejection:
        """Upcoming (confirmed, not started) and past (canceled or started) appointments."""
        if self.db.get(Customers, customer_id) is None:
            return Rejection(RejectionReason.NOT_FOUND, "Customer not found")

        now = now or utcnow()
        appointments = (
            self.db.query(Appointments)
            .filter(Appointments.customer_id == customer_id)
            .order_by(Appointments.start_time)
            .all()
        )

        history = CustomerHistory(customer_id=customer_id)
        for appt in appointments:
            start = from_db_instant(appt.start_time)
            if appt.status == CANCELED or start <= now:
                history.past.append(HistoryEntry(appt, can_cancel=False))
            else:
                can_cancel = now <= start - self.config.cutoff_delta
                history.upcoming.append(HistoryEntry(appt, can_cancel=can_cancel))

        history.past.reverse()
        return history

    # ── Reminders ────────────────────────────────────────────────────────

    def send_reminders(self, days_ahead: int = 0, now: datetime | None = None) -> ReminderSweep | Rejection:
        """
        Reminder sweep for the shop-local day today + days_ahead.

        Triggered externally (cron). Appointments without any contact email
        are skipped.
        """
        if days_ahead < 0:
            return Rejection(RejectionReason.VALIDATION, "days_ahead cannot be negative")

        now = now or utcnow()
        target_date = now.astimezone(self.config.tz).date() + timedelta(days=days_ahead)
        sweep = ReminderSweep(day=target_date)

        for appt in self._appointments_on(target_date):
            if appt.status != CONFIRMED:
                continue

            email = appt.client_email or (appt.customer.email if appt.customer else None)
            if not email:
                logger.info(f"Skipping reminder for appointment {appt.id}: no email available")
                sweep.skipped += 1
                continue

            if self._notify("send_reminder", appt.id):
                sweep.sent += 1
            else:
                sweep.failed += 1

        logger.info(
            f"Reminder sweep for {target_date}: sent={sweep.sent} "
            f"skipped={sweep.skipped} failed={sweep.failed}"
        )
        return sweep

    # ── Helpers ──────────────────────────────────────────────────────────

    def _notify(self, method: str, appointment_id: int) -> bool:
        try:
            ok = bool(getattr(self.notifier, method)(appointment_id))
        except Exception:
            logger.exception(f"Notification {method} failed for appointment {appointment_id}")
            return False
        if not ok:
            logger.warning(f"Notification {method} not delivered for appointment {appointment_id}")
        return ok

    def _horizon_end(self, now: datetime) -> date:
        return now.astimezone(self.config.tz).date() + timedelta(days=self.config.horizon_days)

    def _schedule(self) -> dict:
        row = self.db.query(ShopSettings).order_by(ShopSettings.id).first()
        if row is None:
            logger.warning("shop_settings row missing, every day is closed")
            return {}
        return parse_open_hours(row.open_hours)

    def _override(self, target_date: date) -> DayOverrides | None:
        return (
            self.db.query(DayOverrides)
            .filter(DayOverrides.day == target_date.isoformat())
            .first()
        )

    def _blocks(self, target_date: date) -> list[SlotBlocks]:
        return (
            self.db.query(SlotBlocks)
            .filter(SlotBlocks.day == target_date.isoformat())
            .order_by(SlotBlocks.start_time)
            .all()
        )

    def _appointments_on(self, target_date: date) -> list[Appointments]:
        """Every appointment starting on the shop-local day, any status."""
        start_s, end_s = day_bounds(target_date, self.config.tz)
        return (
            self.db.query(Appointments)
            .filter(
                Appointments.start_time >= start_s,
                Appointments.start_time < end_s,
            )
            .order_by(Appointments.start_time)
            .all()
        )

    def _find_overlapping(
        self,
        start_s: str,
        end_s: str,
        exclude_id: int | None = None,
    ) -> Appointments | None:
        """A confirmed regular appointment overlapping [start_s, end_s), if any."""
        query = self.db.query(Appointments).filter(
            Appointments.status == CONFIRMED,
            Appointments.is_bonus == 0,
            Appointments.start_time < end_s,
            Appointments.end_time > start_s,
        )
        if exclude_id is not None:
            query = query.filter(Appointments.id != exclude_id)
        return query.first()
