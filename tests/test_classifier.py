from types import SimpleNamespace
from zoneinfo import ZoneInfo

from barbershop.services.availability.classifier import SlotStatus, classify

ROME = ZoneInfo("Europe/Rome")
SLOTS = ["09:00", "09:45", "10:30", "11:15", "12:00", "12:45"]


def appointment(id, start_utc, status="CONFIRMED", is_bonus=0):
    return SimpleNamespace(id=id, start_time=start_utc, status=status, is_bonus=is_bonus)


def block(id, start, end):
    return SimpleNamespace(id=id, start_time=start, end_time=end)


def statuses(result):
    return {s.time: s.status for s in result}


def test_all_free_without_appointments_or_blocks():
    result = classify(SLOTS, [], [], ROME)
    assert [s.time for s in result] == SLOTS
    assert all(s.status == SlotStatus.free for s in result)


def test_confirmed_appointment_books_its_slot():
    # 10:30 Rome on 2030-01-07 is 09:30 UTC
    result = classify(SLOTS, [appointment(7, "2030-01-07T09:30:00")], [], ROME)
    by_time = {s.time: s for s in result}

    assert by_time["10:30"].status == SlotStatus.booked
    assert by_time["10:30"].appointment_id == 7
    assert [t for t, st in statuses(result).items() if st != SlotStatus.free] == ["10:30"]


def test_block_marks_slot_blocked():
    result = classify(SLOTS, [], [block(3, "09:00", "09:45")], ROME)
    assert statuses(result)["09:00"] == SlotStatus.blocked
    assert statuses(result)["09:45"] == SlotStatus.free


def test_block_covers_every_slot_start_inside_its_range():
    result = classify(SLOTS, [], [block(1, "09:30", "11:00")], ROME)
    st = statuses(result)
    assert st["09:00"] == SlotStatus.free
    assert st["09:45"] == SlotStatus.blocked
    assert st["10:30"] == SlotStatus.blocked
    assert st["11:15"] == SlotStatus.free


def test_overlapping_blocks_are_fine():
    result = classify(SLOTS, [], [block(1, "09:00", "10:00"), block(2, "09:30", "10:15")], ROME)
    assert statuses(result)["09:45"] == SlotStatus.blocked


def test_booked_takes_precedence_over_blocked():
    result = classify(
        SLOTS,
        [appointment(1, "2030-01-07T08:00:00")],
        [block(2, "09:00", "09:45")],
        ROME,
    )
    assert statuses(result)["09:00"] == SlotStatus.booked


def test_bonus_and_canceled_appointments_leave_slot_free():
    result = classify(
        SLOTS,
        [
            appointment(1, "2030-01-07T08:00:00", is_bonus=1),
            appointment(2, "2030-01-07T08:45:00", status="CANCELED"),
        ],
        [],
        ROME,
    )
    assert statuses(result)["09:00"] == SlotStatus.free
    assert statuses(result)["09:45"] == SlotStatus.free
