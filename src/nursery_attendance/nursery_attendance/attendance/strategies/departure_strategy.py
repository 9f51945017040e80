from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ...core.enums import ScanType
from ..model import DailyAttendance
from .base import ScanStrategy


class DepartureStrategy(ScanStrategy):
    """IN -> OUT. Without a row for the day a partial row is created
    (is_present stays false) so the departure is still on record."""

    scan_type = ScanType.DEPARTURE

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
                is_present=False,
                departure_time=now,
                departure_scanned_by=staff_id,
            )
        return replace(current, departure_time=now, departure_scanned_by=staff_id)
