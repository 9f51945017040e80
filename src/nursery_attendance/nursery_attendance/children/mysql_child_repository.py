from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..core.enums import ChildStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Child
from .repository import ChildRepository

_SELECT_CHILD = """
    SELECT c.id, c.first_name, c.last_name, c.code_qr_id, c.birth_date, c.status,
           c.section, c.group_id, c.assigned_educator_id, c.photo_url,
           g.name AS group_name
    FROM children c
    LEFT JOIN `groups` g ON g.id = c.group_id
"""


def _row_to_child(r: dict) -> Child:
    return Child(
        child_id=int(r["id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        code_qr_id=r["code_qr_id"],
        birth_date=r["birth_date"],
        status=ChildStatus(r["status"]),
        section=r.get("section"),
        group_id=int(r["group_id"]) if r.get("group_id") is not None else None,
        assigned_educator_id=int(r["assigned_educator_id"]) if r.get("assigned_educator_id") is not None else None,
        group_name=r.get("group_name"),
        photo_url=r.get("photo_url"),
    )


class MySQLChildRepository(ChildRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, child_id: int) -> Optional[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_CHILD + " WHERE c.id=%s", (int(child_id),))
            r = fetchone(cur)
            return _row_to_child(r) if r else None

    def get_active_by_code(self, code_qr_id: str) -> Optional[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_CHILD + " WHERE c.code_qr_id=%s AND c.status=%s",
                (code_qr_id, ChildStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _row_to_child(r) if r else None

    def list_active(self, *, section: Optional[str] = None, group_id: Optional[int] = None) -> Sequence[Child]:
        clauses = ["c.status=%s"]
        params: list[object] = [ChildStatus.ACTIVE.value]

        if section is not None:
            clauses.append("c.section=%s")
            params.append(section)
        if group_id is not None:
            clauses.append("c.group_id=%s")
            params.append(int(group_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_CHILD + f" WHERE {where} ORDER BY c.last_name, c.first_name",
                tuple(params),
            )
            return [_row_to_child(r) for r in fetchall(cur)]

    def count_active_by_group(self) -> Mapping[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT group_id, COUNT(*) AS n
                FROM children
                WHERE status=%s AND group_id IS NOT NULL
                GROUP BY group_id
                """,
                (ChildStatus.ACTIVE.value,),
            )
            return {int(r["group_id"]): int(r["n"]) for r in fetchall(cur)}

    def update_group(self, child_id: int, *, group_id: Optional[int], section: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE children SET group_id=%s, section=%s WHERE id=%s",
                (group_id, section, int(child_id)),
            )
            return cur.rowcount > 0
