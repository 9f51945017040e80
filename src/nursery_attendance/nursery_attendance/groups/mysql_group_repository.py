from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Group
from .repository import GroupRepository


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _row_to_group(r: dict) -> Group:
    return Group(
        group_id=int(r["id"]),
        name=r["name"],
        section=r["section"],
        capacity=_opt_int(r.get("capacity")),
        age_min_months=_opt_int(r.get("age_min_months")),
        age_max_months=_opt_int(r.get("age_max_months")),
        assigned_educator_id=_opt_int(r.get("assigned_educator_id")),
    )


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, section, capacity, age_min_months, age_max_months, assigned_educator_id
                FROM `groups`
                WHERE id=%s
                """,
                (int(group_id),),
            )
            r = fetchone(cur)
            return _row_to_group(r) if r else None

    def list_all(self, *, section: Optional[str] = None) -> Sequence[Group]:
        sql = """
            SELECT id, name, section, capacity, age_min_months, age_max_months, assigned_educator_id
            FROM `groups`
        """
        params: tuple = ()
        if section is not None:
            sql += " WHERE section=%s"
            params = (section,)
        sql += " ORDER BY name ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_group(r) for r in fetchall(cur)]
