from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.model import DailyAttendance
from ..attendance.punctuality import LateArrivalPolicy
from ..attendance.repository import AttendanceRepository
from ..children.repository import ChildRepository
from ..common.datetime_utils import Clock, SystemClock, format_age
from ..core.enums import AttendanceStatus

REPORT_FIELDS = [
    "attendance_date",
    "child_id",
    "full_name",
    "age",
    "section",
    "group_name",
    "arrival",
    "departure",
    "status",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


def _hm(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "-"


class AttendanceReportService:
    def __init__(
        self,
        children: ChildRepository,
        attendance: AttendanceRepository,
        *,
        late_policy: Optional[LateArrivalPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        self._children = children
        self._attendance = attendance
        self._late = late_policy or LateArrivalPolicy()
        self._clock = clock or SystemClock()

    def classify(self, record: Optional[DailyAttendance], section: Optional[str]) -> AttendanceStatus:
        if record is None:
            return AttendanceStatus.UNMARKED
        if record.departure_time is not None:
            return AttendanceStatus.DEPARTED
        if not record.is_present:
            return AttendanceStatus.ABSENT
        if self._late.is_late(section, record.arrival_time):
            return AttendanceStatus.LATE
        return AttendanceStatus.PRESENT

    def daily_summary(
        self,
        *,
        day: Optional[date] = None,
        section: Optional[str] = None,
        group_id: Optional[int] = None,
    ) -> ReportData:
        day = day or self._clock.now().date()
        children = self._children.list_active(section=section, group_id=group_id)
        records = {
            r.child_id: r
            for r in self._attendance.list_for_date(day, child_ids=[c.child_id for c in children])
        }

        summary = {"total": len(children), "present": 0, "absent": 0, "late": 0, "departed": 0, "unmarked": 0}
        rows: list[dict] = []
        for child in children:
            rec = records.get(child.child_id)
            status = self.classify(rec, child.section)

            if rec is None:
                summary["unmarked"] += 1
            elif rec.is_present:
                summary["present"] += 1
            else:
                summary["absent"] += 1
            if rec is not None and self._late.is_late(child.section, rec.arrival_time):
                summary["late"] += 1
            if status == AttendanceStatus.DEPARTED:
                summary["departed"] += 1

            rows.append(
                {
                    "attendance_date": day.strftime("%Y-%m-%d"),
                    "child_id": child.child_id,
                    "full_name": child.full_name,
                    "age": format_age(child.age_months(day)),
                    "section": child.section or "-",
                    "group_name": child.group_name or "-",
                    "arrival": _hm(rec.arrival_time if rec else None),
                    "departure": _hm(rec.departure_time if rec else None),
                    "status": status.value,
                }
            )

        return ReportData(rows=rows, summary=summary)


def report_to_csv(data: ReportData) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
    writer.writeheader()
    for row in data.rows:
        writer.writerow(row)
    # BOM so spreadsheet tools pick up UTF-8 names
    return out.getvalue().encode("utf-8-sig")
