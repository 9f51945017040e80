from __future__ import annotations

from datetime import date, datetime
from typing import ContextManager, Iterable, Optional, Protocol, Sequence

from ..core.enums import ScanType
from ..scans.model import ScanEvent
from .model import DailyAttendance


class AttendanceTransaction(Protocol):
    """Unit of work bound to one child.

    Implementations hold an exclusive lock on that child for the lifetime of the
    transaction, so the latest-scan read, the scan append and the attendance
    upsert commit together. Other children are not blocked.
    """

    def latest_scan(self) -> Optional[ScanEvent]:
        raise NotImplementedError

    def append_scan(self, *, scan_type: ScanType, scan_time: datetime, scanned_by: Optional[int]) -> ScanEvent:
        raise NotImplementedError

    def get_daily(self, day: date) -> Optional[DailyAttendance]:
        raise NotImplementedError

    def save_daily(self, record: DailyAttendance) -> None:
        """Upsert keyed on (child_id, attendance_date)."""

        raise NotImplementedError


class AttendanceRepository(Protocol):
    def child_transaction(self, child_id: int) -> ContextManager[AttendanceTransaction]:
        raise NotImplementedError

    def get_for_child_and_date(self, child_id: int, day: date) -> Optional[DailyAttendance]:
        raise NotImplementedError

    def list_for_date(self, day: date, *, child_ids: Optional[Iterable[int]] = None) -> Sequence[DailyAttendance]:
        raise NotImplementedError

    def upsert_presence(self, *, child_id: int, day: date, is_present: bool, recorded_by: Optional[int]) -> None:
        """Manual roll call: set is_present only, times untouched."""

        raise NotImplementedError
