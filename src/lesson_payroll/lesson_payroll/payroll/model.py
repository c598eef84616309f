from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import DeductionReason, LessonAction, SalaryStatus


@dataclass(frozen=True)
class PenaltyBreakdown:
    """Penalty totals per action, plus how many lesson-actions were missed."""

    amounts: Mapping[LessonAction, int] = field(default_factory=dict)
    missed: Mapping[LessonAction, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.amounts.values())

    def amount_for(self, action: LessonAction) -> int:
        return int(self.amounts.get(action, 0))

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_action": {
                action.value: {"missed": int(self.missed.get(action, 0)), "amount": self.amount_for(action)}
                for action in LessonAction
            },
        }


@dataclass(frozen=True)
class Deduction:
    """Manual deduction entered by an admin, optionally tied to one lesson."""

    deduction_id: int
    teacher_id: int
    amount: int
    reason: DeductionReason
    applied_at: datetime
    lesson_id: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class SalaryComputation:
    """Everything derived from lessons, penalties and deductions for one teacher-month."""

    lessons_count: int
    lesson_rate_amd: int
    gross_amount: int
    penalties: PenaltyBreakdown
    other_deductions: int

    @property
    def penalty_deductions(self) -> int:
        return self.penalties.total

    @property
    def total_deductions(self) -> int:
        return self.penalty_deductions + self.other_deductions

    @property
    def net_amount(self) -> int:
        return self.gross_amount - self.total_deductions


@dataclass(frozen=True)
class SalaryRecord:
    salary_id: int
    teacher_id: int
    month: date
    lessons_count: int
    gross_amount: int
    absence_penalty_amd: int
    feedback_penalty_amd: int
    voice_penalty_amd: int
    text_penalty_amd: int
    penalty_deductions: int
    other_deductions: int
    total_deductions: int
    net_amount: int
    status: SalaryStatus
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "salary_id": self.salary_id,
            "teacher_id": self.teacher_id,
            "month": self.month.strftime("%Y-%m"),
            "lessons_count": self.lessons_count,
            "gross_amount": self.gross_amount,
            "penalties": {
                LessonAction.ABSENCE.value: self.absence_penalty_amd,
                LessonAction.FEEDBACKS.value: self.feedback_penalty_amd,
                LessonAction.VOICE.value: self.voice_penalty_amd,
                LessonAction.TEXT.value: self.text_penalty_amd,
            },
            "penalty_deductions": self.penalty_deductions,
            "other_deductions": self.other_deductions,
            "total_deductions": self.total_deductions,
            "net_amount": self.net_amount,
            "status": self.status.value,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class LessonSalaryRow:
    lesson_id: int
    lesson_name: str
    lesson_date: datetime
    obligation_completed: int
    obligation_total: int
    salary: int
    penalty: int
    other_deduction: int

    @property
    def deduction(self) -> int:
        return self.penalty + self.other_deduction

    @property
    def total(self) -> int:
        return self.salary - self.deduction

    def to_dict(self) -> dict:
        return {
            "lesson_id": self.lesson_id,
            "lesson_name": self.lesson_name,
            "lesson_date": self.lesson_date.isoformat(),
            "obligation_completed": self.obligation_completed,
            "obligation_total": self.obligation_total,
            "salary": self.salary,
            "penalty": self.penalty,
            "other_deduction": self.other_deduction,
            "deduction": self.deduction,
            "total": self.total,
        }


@dataclass(frozen=True)
class SalaryBreakdown:
    teacher_id: int
    teacher_name: str
    month: date
    lessons: Sequence[LessonSalaryRow]

    def to_dict(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "month": self.month.strftime("%Y-%m"),
            "lessons": [row.to_dict() for row in self.lessons],
        }


@dataclass(frozen=True)
class BatchResult:
    generated: list[SalaryRecord]
    errors: list[dict]

    def to_dict(self) -> dict:
        return {
            "generated": len(self.generated),
            "errors": len(self.errors),
            "records": [r.to_dict() for r in self.generated],
            "error_details": self.errors,
        }
