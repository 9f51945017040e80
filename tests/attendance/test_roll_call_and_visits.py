from datetime import date, datetime

import pytest

from src.nursery_attendance.nursery_attendance.attendance.model import Visit
from src.nursery_attendance.nursery_attendance.core.enums import ScanType
from src.nursery_attendance.nursery_attendance.core.exceptions import NotFoundError, ValidationError

DAY = date(2026, 3, 2)


@pytest.fixture
def service(container):
    return container.attendance_service


def test_visits_rebuilt_from_scan_log(service, clock):
    for h, m in [(8, 0), (11, 30), (13, 0), (17, 15)]:
        clock.set(datetime(2026, 3, 2, h, m))
        service.scan("LPRDS-001")

    assert service.visits_for_day(1, DAY) == [
        Visit(datetime(2026, 3, 2, 8, 0), datetime(2026, 3, 2, 11, 30)),
        Visit(datetime(2026, 3, 2, 13, 0), datetime(2026, 3, 2, 17, 15)),
    ]


def test_open_visit_and_orphan_departure(service, clock):
    clock.set(datetime(2026, 3, 2, 7, 50))
    service.scan("LPRDS-001", action=ScanType.DEPARTURE)
    clock.set(datetime(2026, 3, 2, 8, 30))
    service.scan("LPRDS-001", action=ScanType.ARRIVAL)

    assert service.visits_for_day(1, DAY) == [
        Visit(None, datetime(2026, 3, 2, 7, 50)),
        Visit(datetime(2026, 3, 2, 8, 30), None),
    ]


def test_mark_absent_then_present_keeps_times(service, clock, attendance_repo):
    clock.set(datetime(2026, 3, 2, 8, 0))
    service.scan("LPRDS-001", staff_id=7)

    absent = service.mark_absent(1, staff_id=3)
    assert absent.is_present is False
    assert absent.arrival_time == datetime(2026, 3, 2, 8, 0)

    present = service.mark_present(1, staff_id=3)
    assert present.is_present is True
    assert attendance_repo.presence_calls[-1]["recorded_by"] == 3


def test_mark_present_without_scan_creates_row(service, attendance_repo):
    record = service.mark_present(2, day=DAY, staff_id=5)

    assert record.is_present
    assert record.arrival_time is None
    assert attendance_repo.get_for_child_and_date(2, DAY) == record


def test_roll_call_unknown_child(service):
    with pytest.raises(NotFoundError):
        service.mark_present(999)
    with pytest.raises(NotFoundError):
        service.visits_for_day(999, DAY)


def test_manual_arrival_then_departure(service, clock, scans_repo):
    clock.set(datetime(2026, 3, 2, 8, 0))
    service.mark_present(1, staff_id=3)

    arrived = service.record_arrival(1, staff_id=3)
    assert arrived.arrival_time == datetime(2026, 3, 2, 8, 0)
    assert arrived.arrival_scanned_by == 3
    assert arrived.departure_time is None

    clock.set(datetime(2026, 3, 2, 16, 30))
    left = service.record_departure(1, staff_id=4)
    assert left.arrival_time == datetime(2026, 3, 2, 8, 0)
    assert left.departure_time == datetime(2026, 3, 2, 16, 30)
    assert left.departure_scanned_by == 4
    assert service.get_daily(1, DAY) == left
    # manual stamps do not write to the scan log
    assert scans_repo.events == []


def test_manual_arrival_requires_presence(service):
    with pytest.raises(ValidationError):
        service.record_arrival(1)

    service.mark_absent(1)
    with pytest.raises(ValidationError):
        service.record_arrival(1)


def test_manual_arrival_rejected_when_already_recorded(service, clock):
    service.mark_present(1)
    service.record_arrival(1)
    clock.advance(minutes=10)

    with pytest.raises(ValidationError, match="Arrival already recorded"):
        service.record_arrival(1)


def test_manual_departure_preconditions(service, clock):
    with pytest.raises(ValidationError):
        service.record_departure(1)

    service.mark_present(1)
    with pytest.raises(ValidationError, match="No arrival recorded"):
        service.record_departure(1)

    service.record_arrival(1)
    clock.advance(minutes=30)
    service.record_departure(1)
    with pytest.raises(ValidationError, match="Departure already recorded"):
        service.record_departure(1)


def test_manual_departure_cannot_precede_arrival(service, clock):
    service.mark_present(1)
    service.record_arrival(1)
    clock.advance(minutes=-5)

    with pytest.raises(ValidationError):
        service.record_departure(1)
    assert service.get_daily(1, DAY).departure_time is None


def test_manual_stamps_unknown_child(service):
    with pytest.raises(NotFoundError):
        service.record_arrival(999)
    with pytest.raises(NotFoundError):
        service.record_departure(999)
