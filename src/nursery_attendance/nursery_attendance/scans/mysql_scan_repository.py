from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..core.enums import ScanType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ScanEvent
from .repository import ScanRepository


def row_to_scan(r: dict) -> ScanEvent:
    return ScanEvent(
        scan_id=int(r["id"]),
        child_id=int(r["child_id"]),
        scan_type=ScanType(r["scan_type"]),
        scan_time=r["scan_time"],
        scanned_by=int(r["scanned_by"]) if r.get("scanned_by") is not None else None,
    )


LATEST_SCAN_SQL = """
    SELECT id, child_id, scan_type, scan_time, scanned_by
    FROM scan_events
    WHERE child_id=%s
    ORDER BY scan_time DESC, id DESC
    LIMIT 1
"""


class MySQLScanRepository(ScanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_child(self, child_id: int) -> Optional[ScanEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(LATEST_SCAN_SQL, (int(child_id),))
            r = fetchone(cur)
            return row_to_scan(r) if r else None

    def list_for_child_and_day(self, child_id: int, day: date) -> Sequence[ScanEvent]:
        start = datetime.combine(day, time.min)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, child_id, scan_type, scan_time, scanned_by
                FROM scan_events
                WHERE child_id=%s AND scan_time >= %s AND scan_time < %s
                ORDER BY scan_time ASC, id ASC
                """,
                (int(child_id), start, start + timedelta(days=1)),
            )
            return [row_to_scan(r) for r in fetchall(cur)]
