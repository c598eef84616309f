from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import DeductionReason, LessonAction, SalaryStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_amd
from .model import Deduction, SalaryComputation, SalaryRecord
from .repository import DeductionRepository, SalaryRecordRepository

_SALARY_COLUMNS = """
    salary_id, teacher_id, month, lessons_count, gross_amount,
    absence_penalty_amd, feedback_penalty_amd, voice_penalty_amd, text_penalty_amd,
    penalty_deductions, other_deductions, total_deductions, net_amount,
    status, paid_at, notes
"""


def _to_salary(r: dict) -> SalaryRecord:
    return SalaryRecord(
        salary_id=int(r["salary_id"]),
        teacher_id=int(r["teacher_id"]),
        month=r["month"],
        lessons_count=int(r["lessons_count"]),
        gross_amount=to_amd(r["gross_amount"]),
        absence_penalty_amd=to_amd(r["absence_penalty_amd"]),
        feedback_penalty_amd=to_amd(r["feedback_penalty_amd"]),
        voice_penalty_amd=to_amd(r["voice_penalty_amd"]),
        text_penalty_amd=to_amd(r["text_penalty_amd"]),
        penalty_deductions=to_amd(r["penalty_deductions"]),
        other_deductions=to_amd(r["other_deductions"]),
        total_deductions=to_amd(r["total_deductions"]),
        net_amount=to_amd(r["net_amount"]),
        status=SalaryStatus(r["status"]),
        paid_at=r.get("paid_at"),
        notes=r.get("notes"),
    )


def _amount_values(c: SalaryComputation) -> tuple:
    return (
        c.lessons_count,
        c.gross_amount,
        c.penalties.amount_for(LessonAction.ABSENCE),
        c.penalties.amount_for(LessonAction.FEEDBACKS),
        c.penalties.amount_for(LessonAction.VOICE),
        c.penalties.amount_for(LessonAction.TEXT),
        c.penalty_deductions,
        c.other_deductions,
        c.total_deductions,
        c.net_amount,
    )


class MySQLSalaryRecordRepository(SalaryRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SALARY_COLUMNS} FROM salary_records WHERE salary_id=%s", (int(salary_id),))
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def get_for_teacher_month(self, *, teacher_id: int, month: date) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SALARY_COLUMNS} FROM salary_records WHERE teacher_id=%s AND month=%s",
                (int(teacher_id), month),
            )
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def create(self, *, teacher_id: int, month: date, computation: SalaryComputation) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO salary_records(
                        teacher_id, month, lessons_count, gross_amount,
                        absence_penalty_amd, feedback_penalty_amd, voice_penalty_amd, text_penalty_amd,
                        penalty_deductions, other_deductions, total_deductions, net_amount, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(teacher_id), month, *_amount_values(computation), SalaryStatus.PENDING.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.errors.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            raise DuplicateRecordError(
                f"Salary record for teacher {teacher_id} in {month:%Y-%m} already exists"
            ) from e

    def update_amounts(self, *, salary_id: int, computation: SalaryComputation) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # PAID rows are never rewritten; lock before checking.
            cur.execute("SELECT status FROM salary_records WHERE salary_id=%s FOR UPDATE", (int(salary_id),))
            r = fetchone(cur)
            if not r or r["status"] == SalaryStatus.PAID.value:
                return False
            cur.execute(
                """
                UPDATE salary_records
                SET lessons_count=%s, gross_amount=%s,
                    absence_penalty_amd=%s, feedback_penalty_amd=%s, voice_penalty_amd=%s, text_penalty_amd=%s,
                    penalty_deductions=%s, other_deductions=%s, total_deductions=%s, net_amount=%s
                WHERE salary_id=%s
                """,
                (*_amount_values(computation), int(salary_id)),
            )
            return True

    def update_status(
        self,
        *,
        salary_id: int,
        from_status: SalaryStatus,
        to_status: SalaryStatus,
        paid_at: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_records
                SET status=%s, paid_at=COALESCE(%s, paid_at), notes=COALESCE(%s, notes)
                WHERE salary_id=%s AND status=%s
                """,
                (to_status.value, paid_at, notes, int(salary_id), from_status.value),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        teacher_id: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[SalaryRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if teacher_id is not None:
            clauses.append("teacher_id=%s")
            params.append(int(teacher_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        limit_clause = ""
        if limit is not None:
            limit_clause = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SALARY_COLUMNS}
                FROM salary_records
                WHERE {' AND '.join(clauses)}
                ORDER BY month DESC, teacher_id ASC
                {limit_clause}
                """,
                tuple(params),
            )
            return [_to_salary(r) for r in fetchall(cur)]


class MySQLDeductionRepository(DeductionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        teacher_id: int,
        amount: int,
        reason: DeductionReason,
        applied_at: datetime,
        lesson_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO deductions(teacher_id, lesson_id, amount, reason, applied_at, note)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(teacher_id), lesson_id, int(amount), reason.value, applied_at, note),
            )
            return int(cur.lastrowid)

    def list_for_teacher(
        self,
        *,
        teacher_id: int,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Sequence[Deduction]:
        clauses = ["teacher_id=%s"]
        params: list[object] = [int(teacher_id)]
        if date_from is not None:
            clauses.append("applied_at >= %s")
            params.append(date_from)
        if date_to is not None:
            clauses.append("applied_at <= %s")
            params.append(date_to)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT deduction_id, teacher_id, lesson_id, amount, reason, applied_at, note
                FROM deductions
                WHERE {' AND '.join(clauses)}
                ORDER BY applied_at ASC, deduction_id ASC
                """,
                tuple(params),
            )
            return [
                Deduction(
                    deduction_id=int(r["deduction_id"]),
                    teacher_id=int(r["teacher_id"]),
                    amount=to_amd(r["amount"]),
                    reason=DeductionReason(r["reason"]),
                    applied_at=r["applied_at"],
                    lesson_id=int(r["lesson_id"]) if r.get("lesson_id") is not None else None,
                    note=r.get("note"),
                )
                for r in fetchall(cur)
            ]
