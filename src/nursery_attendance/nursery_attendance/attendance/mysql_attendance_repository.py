from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterable, Iterator, Optional, Sequence

from ..core.enums import ScanType
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..scans.model import ScanEvent
from ..scans.mysql_scan_repository import LATEST_SCAN_SQL, row_to_scan
from .model import DailyAttendance
from .repository import AttendanceRepository, AttendanceTransaction

_SELECT_DAILY = """
    SELECT child_id, attendance_date, is_present, arrival_time, departure_time,
           arrival_scanned_by, departure_scanned_by
    FROM daily_attendance
"""


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _row_to_daily(r: dict) -> DailyAttendance:
    return DailyAttendance(
        child_id=int(r["child_id"]),
        attendance_date=r["attendance_date"],
        is_present=bool(r["is_present"]),
        arrival_time=r.get("arrival_time"),
        departure_time=r.get("departure_time"),
        arrival_scanned_by=_opt_int(r.get("arrival_scanned_by")),
        departure_scanned_by=_opt_int(r.get("departure_scanned_by")),
    )


class MySQLAttendanceTransaction(AttendanceTransaction):
    """Runs on the cursor that holds the child's row lock."""

    def __init__(self, cur, child_id: int):
        self._cur = cur
        self._child_id = int(child_id)

    def latest_scan(self) -> Optional[ScanEvent]:
        self._cur.execute(LATEST_SCAN_SQL, (self._child_id,))
        r = fetchone(self._cur)
        return row_to_scan(r) if r else None

    def append_scan(self, *, scan_type: ScanType, scan_time: datetime, scanned_by: Optional[int]) -> ScanEvent:
        self._cur.execute(
            """
            INSERT INTO scan_events(child_id, scan_type, scan_time, scanned_by)
            VALUES(%s,%s,%s,%s)
            """,
            (self._child_id, scan_type.value, scan_time, scanned_by),
        )
        return ScanEvent(
            scan_id=int(self._cur.lastrowid),
            child_id=self._child_id,
            scan_type=scan_type,
            scan_time=scan_time,
            scanned_by=scanned_by,
        )

    def get_daily(self, day: date) -> Optional[DailyAttendance]:
        self._cur.execute(
            _SELECT_DAILY + " WHERE child_id=%s AND attendance_date=%s",
            (self._child_id, day),
        )
        r = fetchone(self._cur)
        return _row_to_daily(r) if r else None

    def save_daily(self, record: DailyAttendance) -> None:
        self._cur.execute(
            """
            INSERT INTO daily_attendance(
                child_id, attendance_date, is_present, arrival_time, departure_time,
                arrival_scanned_by, departure_scanned_by
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                is_present=VALUES(is_present),
                arrival_time=VALUES(arrival_time),
                departure_time=VALUES(departure_time),
                arrival_scanned_by=VALUES(arrival_scanned_by),
                departure_scanned_by=VALUES(departure_scanned_by)
            """,
            (
                self._child_id,
                record.attendance_date,
                int(record.is_present),
                record.arrival_time,
                record.departure_time,
                record.arrival_scanned_by,
                record.departure_scanned_by,
            ),
        )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def child_transaction(self, child_id: int) -> Iterator[AttendanceTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            # serialises concurrent scans of the same child until commit
            cur.execute("SELECT id FROM children WHERE id=%s FOR UPDATE", (int(child_id),))
            if not fetchone(cur):
                raise NotFoundError("Child not found")
            yield MySQLAttendanceTransaction(cur, child_id)

    def get_for_child_and_date(self, child_id: int, day: date) -> Optional[DailyAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_DAILY + " WHERE child_id=%s AND attendance_date=%s", (int(child_id), day))
            r = fetchone(cur)
            return _row_to_daily(r) if r else None

    def list_for_date(self, day: date, *, child_ids: Optional[Iterable[int]] = None) -> Sequence[DailyAttendance]:
        sql = _SELECT_DAILY + " WHERE attendance_date=%s"
        params: list[object] = [day]
        if child_ids is not None:
            ids = [int(i) for i in child_ids]
            if not ids:
                return []
            sql += f" AND child_id IN ({', '.join(['%s'] * len(ids))})"
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_daily(r) for r in fetchall(cur)]

    def upsert_presence(self, *, child_id: int, day: date, is_present: bool, recorded_by: Optional[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_attendance(child_id, attendance_date, is_present, recorded_by)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE is_present=VALUES(is_present), recorded_by=VALUES(recorded_by)
                """,
                (int(child_id), day, int(is_present), recorded_by),
            )
