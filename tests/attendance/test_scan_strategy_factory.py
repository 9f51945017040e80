from datetime import date, datetime

from src.nursery_attendance.nursery_attendance.attendance.factory import ScanStrategyFactory
from src.nursery_attendance.nursery_attendance.attendance.model import DailyAttendance
from src.nursery_attendance.nursery_attendance.attendance.strategies.arrival_strategy import ArrivalStrategy
from src.nursery_attendance.nursery_attendance.attendance.strategies.departure_strategy import DepartureStrategy
from src.nursery_attendance.nursery_attendance.core.enums import ScanType
from src.nursery_attendance.nursery_attendance.scans.model import ScanEvent

TODAY = date(2026, 3, 2)


def _scan(scan_type, when):
    return ScanEvent(scan_id=1, child_id=1, scan_type=scan_type, scan_time=when)


def test_factory_returns_strategy_for_scan_type():
    factory = ScanStrategyFactory()
    assert isinstance(factory.for_scan(ScanType.ARRIVAL), ArrivalStrategy)
    assert isinstance(factory.for_scan(ScanType.DEPARTURE), DepartureStrategy)


def test_suggest_arrival_without_history():
    assert ScanStrategyFactory().suggest(last_scan=None, today=TODAY) == ScanType.ARRIVAL


def test_suggest_follows_last_scan_of_today():
    factory = ScanStrategyFactory()
    morning = datetime(2026, 3, 2, 8, 0)
    assert factory.suggest(last_scan=_scan(ScanType.ARRIVAL, morning), today=TODAY) == ScanType.DEPARTURE
    assert factory.suggest(last_scan=_scan(ScanType.DEPARTURE, morning), today=TODAY) == ScanType.ARRIVAL


def test_suggest_ignores_yesterday():
    yesterday = datetime(2026, 3, 1, 17, 0)
    assert ScanStrategyFactory().suggest(last_scan=_scan(ScanType.ARRIVAL, yesterday), today=TODAY) == ScanType.ARRIVAL


def test_arrival_strategy_clears_departure_on_reentry():
    current = DailyAttendance(
        child_id=1,
        attendance_date=TODAY,
        is_present=True,
        arrival_time=datetime(2026, 3, 2, 8, 0),
        departure_time=datetime(2026, 3, 2, 12, 0),
        departure_scanned_by=3,
    )
    now = datetime(2026, 3, 2, 13, 30)

    row = ArrivalStrategy().apply(child_id=1, day=TODAY, current=current, now=now, staff_id=9)

    assert row.arrival_time == now
    assert row.arrival_scanned_by == 9
    assert row.departure_time is None
    assert row.departure_scanned_by is None


def test_departure_strategy_keeps_arrival():
    arrival = datetime(2026, 3, 2, 8, 0)
    current = DailyAttendance(child_id=1, attendance_date=TODAY, is_present=True, arrival_time=arrival)
    now = datetime(2026, 3, 2, 16, 0)

    row = DepartureStrategy().apply(child_id=1, day=TODAY, current=current, now=now, staff_id=4)

    assert row.arrival_time == arrival
    assert row.is_present
    assert row.departure_time == now
