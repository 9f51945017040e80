from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from ...core.enums import ScanType
from ..model import DailyAttendance


class ScanStrategy(ABC):
    """Strategy Pattern: how an accepted scan changes today's attendance row."""

    scan_type: ScanType

    @abstractmethod
    def apply(
        self,
        *,
        child_id: int,
        day: date,
        current: Optional[DailyAttendance],
        now: datetime,
        staff_id: Optional[int],
    ) -> DailyAttendance:
        raise NotImplementedError
