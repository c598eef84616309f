from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_amd
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "teacher_id, full_name, lesson_rate_amd, hourly_rate, is_active"


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        full_name=r["full_name"],
        lesson_rate_amd=to_amd(r.get("lesson_rate_amd")),
        hourly_rate=to_amd(r.get("hourly_rate")) or 0,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (int(teacher_id),))
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def list_active(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE is_active=1 ORDER BY teacher_id ASC")
            return [_to_teacher(r) for r in fetchall(cur)]
