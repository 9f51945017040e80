from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..children.model import Child
from ..core.enums import ScanType
from ..scans.model import ScanEvent


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class DailyAttendance:
    """Domain entity: one row per (child, calendar date).

    The row describes the current visit of the day. A same-day re-entry
    overwrites the arrival fields and clears the departure fields; the full list
    of visits is derived from the scan log (see AttendanceService.visits_for_day).
    """

    child_id: int
    attendance_date: date
    is_present: bool = False
    arrival_time: Optional[datetime] = None
    departure_time: Optional[datetime] = None
    arrival_scanned_by: Optional[int] = None
    departure_scanned_by: Optional[int] = None

    @property
    def is_in(self) -> bool:
        return self.arrival_time is not None and self.departure_time is None

    def to_dict(self) -> dict:
        return {
            "child_id": self.child_id,
            "attendance_date": self.attendance_date.isoformat(),
            "is_present": self.is_present,
            "arrival_time": _iso(self.arrival_time),
            "departure_time": _iso(self.departure_time),
            "arrival_scanned_by": self.arrival_scanned_by,
            "departure_scanned_by": self.departure_scanned_by,
        }


@dataclass(frozen=True)
class Visit:
    """One (arrival, departure) interval rebuilt from the scan log."""

    arrival_time: Optional[datetime]
    departure_time: Optional[datetime]

    def to_dict(self) -> dict:
        return {"arrival_time": _iso(self.arrival_time), "departure_time": _iso(self.departure_time)}


def child_summary(child: Child) -> dict:
    return {
        "id": child.child_id,
        "first_name": child.first_name,
        "last_name": child.last_name,
        "code_qr_id": child.code_qr_id,
        "section": child.section,
        "group_name": child.group_name,
        "photo_url": child.photo_url,
    }


@dataclass(frozen=True)
class ScanPreview:
    """What a scan would do right now, without writing anything."""

    child: Child
    last_scan: Optional[ScanEvent]
    suggested_action: ScanType
    elapsed_minutes: Optional[float]
    cooldown_ok: bool

    def to_dict(self) -> dict:
        return {
            "child": child_summary(self.child),
            "last_scan": self.last_scan.to_dict() if self.last_scan else None,
            "suggested_action": self.suggested_action.value,
            "elapsed_minutes": self.elapsed_minutes,
            "cooldown_ok": self.cooldown_ok,
        }


@dataclass(frozen=True)
class ScanOutcome:
    """Accepted scan: the event appended and the attendance row written."""

    child: Child
    event: ScanEvent
    suggested_action: ScanType
    attendance: DailyAttendance

    @property
    def followed_suggestion(self) -> bool:
        return self.event.scan_type == self.suggested_action

    @property
    def message(self) -> str:
        label = "Arrival" if self.event.scan_type == ScanType.ARRIVAL else "Departure"
        return f"{label} recorded for {self.child.full_name}"

    def to_dict(self) -> dict:
        return {
            "success": True,
            "status": "accepted",
            "action": self.event.scan_type.value,
            "suggested_action": self.suggested_action.value,
            "child": child_summary(self.child),
            "attendance": self.attendance.to_dict(),
            "message": self.message,
        }
