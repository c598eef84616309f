from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import LessonAction, LessonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_bool
from .model import Lesson
from .repository import LessonRepository

# (flag column, timestamp column) per action
_ACTION_COLUMNS = {
    LessonAction.ABSENCE: ("absence_marked", "absence_marked_at"),
    LessonAction.FEEDBACKS: ("feedbacks_completed", "feedbacks_completed_at"),
    LessonAction.VOICE: ("voice_sent", "voice_sent_at"),
    LessonAction.TEXT: ("text_sent", "text_sent_at"),
}

_SELECT = """
    SELECT
        l.lesson_id, l.teacher_id, l.group_id, l.scheduled_at, l.status, l.topic, l.duration_minutes,
        l.absence_marked, l.absence_marked_at,
        l.feedbacks_completed, l.feedbacks_completed_at,
        l.voice_sent, l.voice_sent_at,
        l.text_sent, l.text_sent_at,
        g.group_name
    FROM lessons l
    LEFT JOIN student_groups g ON g.group_id = l.group_id
"""


def _to_lesson(r: dict) -> Lesson:
    return Lesson(
        lesson_id=int(r["lesson_id"]),
        teacher_id=int(r["teacher_id"]),
        group_id=int(r["group_id"]),
        scheduled_at=r["scheduled_at"],
        status=LessonStatus(r["status"]),
        absence_marked=to_bool(r.get("absence_marked")),
        feedbacks_completed=to_bool(r.get("feedbacks_completed")),
        voice_sent=to_bool(r.get("voice_sent")),
        text_sent=to_bool(r.get("text_sent")),
        absence_marked_at=r.get("absence_marked_at"),
        feedbacks_completed_at=r.get("feedbacks_completed_at"),
        voice_sent_at=r.get("voice_sent_at"),
        text_sent_at=r.get("text_sent_at"),
        topic=r.get("topic"),
        group_name=r.get("group_name"),
        duration_minutes=int(r.get("duration_minutes") or 60),
    )


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.lesson_id=%s", (int(lesson_id),))
            r = fetchone(cur)
            return _to_lesson(r) if r else None

    def list_lessons(
        self,
        *,
        teacher_id: int,
        date_from: datetime,
        date_to: datetime,
        status: Optional[LessonStatus] = None,
    ) -> Sequence[Lesson]:
        clauses = ["l.teacher_id=%s", "l.scheduled_at BETWEEN %s AND %s"]
        params: list[object] = [int(teacher_id), date_from, date_to]
        if status is not None:
            clauses.append("l.status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY l.scheduled_at ASC, l.lesson_id ASC",
                tuple(params),
            )
            return [_to_lesson(r) for r in fetchall(cur)]

    def list_by_ids(self, lesson_ids: Sequence[int], *, status: Optional[LessonStatus] = None) -> Sequence[Lesson]:
        ids = [int(i) for i in lesson_ids]
        if not ids:
            return []
        placeholders = ", ".join(["%s"] * len(ids))
        sql = _SELECT + f" WHERE l.lesson_id IN ({placeholders})"
        params: list[object] = list(ids)
        if status is not None:
            sql += " AND l.status=%s"
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_lesson(r) for r in fetchall(cur)]

    def mark_action(self, *, lesson_id: int, action: LessonAction, at: datetime) -> bool:
        flag_col, at_col = _ACTION_COLUMNS[action]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE lessons SET {flag_col}=1, {at_col}=%s WHERE lesson_id=%s",
                (at, int(lesson_id)),
            )
            return cur.rowcount > 0

    def change_status(self, *, lesson_ids: Sequence[int], from_status: LessonStatus, to_status: LessonStatus) -> int:
        ids = [int(i) for i in lesson_ids]
        if not ids:
            return 0
        placeholders = ", ".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE lessons SET status=%s WHERE status=%s AND lesson_id IN ({placeholders})",
                (to_status.value, from_status.value, *ids),
            )
            return int(cur.rowcount)
