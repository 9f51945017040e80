from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ...core.enums import ScanType
from ..model import DailyAttendance
from .base import ScanStrategy


class ArrivalStrategy(ScanStrategy):
    """OUT -> IN. Re-entry overwrites the arrival and reopens the visit."""

    scan_type = ScanType.ARRIVAL

    def apply(
        self,
        *,
        child_id: int,
        day: date,
        current: Optional[DailyAttendance],
        now: datetime,
        staff_id: Optional[int],
    ) -> DailyAttendance:
        if current is None:
            return DailyAttendance(
                child_id=child_id,
                attendance_date=day,
                is_present=True,
                arrival_time=now,
                arrival_scanned_by=staff_id,
            )
        return replace(
            current,
            is_present=True,
            arrival_time=now,
            arrival_scanned_by=staff_id,
            departure_time=None,
            departure_scanned_by=None,
        )
