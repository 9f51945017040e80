from datetime import date, datetime

import mysql.connector
import pytest

from src.nursery_attendance.nursery_attendance.attendance.model import DailyAttendance
from src.nursery_attendance.nursery_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.nursery_attendance.nursery_attendance.core.enums import ScanType
from src.nursery_attendance.nursery_attendance.core.exceptions import NotFoundError, PersistenceFailure
from src.nursery_attendance.nursery_attendance.database.mysql_base import db_cursor


class FakeCursor:
    def __init__(self, rows):
        self.rows = list(rows)
        self.executed = []
        self.lastrowid = 41
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def fetchall(self):
        out, self.rows = self.rows, []
        return out

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, rows=()):
        self.cur = FakeCursor(rows)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def test_db_cursor_commits_on_success():
    conn = FakeConnection()
    with db_cursor(FakeConnFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and conn.closed and not conn.rolled_back


def test_db_cursor_wraps_driver_errors():
    conn = FakeConnection()
    with pytest.raises(PersistenceFailure):
        with db_cursor(FakeConnFactory(conn)):
            raise mysql.connector.Error("boom")

    assert conn.rolled_back and not conn.committed


def test_db_cursor_rolls_back_domain_errors_unchanged():
    conn = FakeConnection()
    with pytest.raises(NotFoundError):
        with db_cursor(FakeConnFactory(conn)):
            raise NotFoundError("nope")

    assert conn.rolled_back and conn.closed


def test_child_transaction_locks_row_then_writes():
    # lock row, then latest scan lookup (none)
    conn = FakeConnection(rows=[{"id": 1}])
    repo = MySQLAttendanceRepository(FakeConnFactory(conn))
    now = datetime(2026, 3, 2, 8, 0)

    with repo.child_transaction(1) as tx:
        assert tx.latest_scan() is None
        event = tx.append_scan(scan_type=ScanType.ARRIVAL, scan_time=now, scanned_by=7)
        tx.save_daily(DailyAttendance(child_id=1, attendance_date=date(2026, 3, 2), is_present=True, arrival_time=now))

    sqls = [sql for sql, _ in conn.cur.executed]
    assert sqls[0].endswith("FOR UPDATE")
    assert sqls[2].startswith("INSERT INTO scan_events")
    assert "ON DUPLICATE KEY UPDATE" in sqls[3]
    assert event.scan_id == 41
    assert conn.committed


def test_child_transaction_unknown_child_rolls_back():
    conn = FakeConnection(rows=[])
    repo = MySQLAttendanceRepository(FakeConnFactory(conn))

    with pytest.raises(NotFoundError):
        with repo.child_transaction(99):
            pass

    assert conn.rolled_back and not conn.committed
