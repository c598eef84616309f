from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import month_bounds, month_start, now_local, parse_month
from ..common.validators import require_positive_int
from ..core.constants import ACTIONS_PER_LESSON, DEFAULT_LIST_LIMIT
from ..core.enums import DeductionReason, LessonStatus, SalaryStatus
from ..core.exceptions import ConflictError, DomainError, DuplicateRecordError, NotFoundError, ValidationError
from ..lessons.repository import LessonRepository
from ..settings.model import PenaltyConfig
from ..teachers.model import Teacher
from ..teachers.repository import TeacherRepository
from .calculator.base import DeductionCalculator
from .calculator.fixed_penalty_calculator import FixedPenaltyCalculator
from .model import BatchResult, LessonSalaryRow, SalaryBreakdown, SalaryComputation, SalaryRecord
from .repository import DeductionRepository, SalaryRecordRepository

logger = logging.getLogger(__name__)

# Admin-triggered transitions; PAID has no outgoing edge.
_ALLOWED_TRANSITIONS = {
    SalaryStatus.PENDING: {SalaryStatus.PROCESSING},
    SalaryStatus.PROCESSING: {SalaryStatus.PAID},
    SalaryStatus.PAID: set(),
}


class PenaltyConfigProvider(Protocol):
    def get_penalty_config(self) -> PenaltyConfig:
        raise NotImplementedError


class SalaryService:
    def __init__(
        self,
        teachers: TeacherRepository,
        lessons: LessonRepository,
        salaries: SalaryRecordRepository,
        deductions: DeductionRepository,
        settings: PenaltyConfigProvider,
        *,
        calculator: Optional[DeductionCalculator] = None,
    ):
        self._teachers = teachers
        self._lessons = lessons
        self._salaries = salaries
        self._deductions = deductions
        self._settings = settings
        self._calculator = calculator or FixedPenaltyCalculator()

    def _get_teacher(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise NotFoundError(f"Teacher with ID {teacher_id} not found")
        return teacher

    def _month_lessons(self, teacher_id: int, month: date):
        start, end = month_bounds(month)
        return self._lessons.list_lessons(
            teacher_id=teacher_id,
            date_from=start,
            date_to=end,
            status=LessonStatus.COMPLETED,
        )

    def _month_deductions(self, teacher_id: int, month: date):
        start, end = month_bounds(month)
        return self._deductions.list_for_teacher(teacher_id=teacher_id, date_from=start, date_to=end)

    def compute_monthly_salary(self, teacher: Teacher, month: date) -> SalaryComputation:
        """Pure derivation from current lesson flags, penalty config and manual deductions."""
        lessons = self._month_lessons(teacher.teacher_id, month)
        rate = teacher.effective_lesson_rate
        penalties = self._calculator.calculate(lessons, self._settings.get_penalty_config())
        other = sum(d.amount for d in self._month_deductions(teacher.teacher_id, month))

        return SalaryComputation(
            lessons_count=len(lessons),
            lesson_rate_amd=rate,
            gross_amount=len(lessons) * rate,
            penalties=penalties,
            other_deductions=other,
        )

    def generate_monthly_salary(self, teacher_id: int, month: date) -> SalaryRecord:
        """Create or refresh the teacher's salary record for ``month``.

        Refreshing keeps the record id and status. A PAID record is final and
        raises ConflictError without being touched.
        """
        teacher = self._get_teacher(teacher_id)
        month = month_start(month)

        existing = self._salaries.get_for_teacher_month(teacher_id=teacher.teacher_id, month=month)
        if existing and existing.status == SalaryStatus.PAID:
            raise ConflictError(f"Salary for teacher {teacher.teacher_id} in {month:%Y-%m} is already paid")

        computation = self.compute_monthly_salary(teacher, month)

        if existing:
            salary_id = self._refresh_amounts(existing, computation)
        else:
            try:
                salary_id = self._salaries.create(teacher_id=teacher.teacher_id, month=month, computation=computation)
            except DuplicateRecordError:
                # Another request created this teacher-month first.
                existing = self._salaries.get_for_teacher_month(teacher_id=teacher.teacher_id, month=month)
                if not existing:
                    raise
                logger.info(
                    "Salary for teacher %s in %s created concurrently; refreshing it",
                    teacher.teacher_id,
                    f"{month:%Y-%m}",
                )
                salary_id = self._refresh_amounts(existing, computation)

        logger.info(
            "Salary generated teacher=%s month=%s lessons=%s gross=%s deductions=%s net=%s",
            teacher.teacher_id,
            f"{month:%Y-%m}",
            computation.lessons_count,
            computation.gross_amount,
            computation.total_deductions,
            computation.net_amount,
        )
        return self.get_salary_record(salary_id)

    def _refresh_amounts(self, existing: SalaryRecord, computation: SalaryComputation) -> int:
        if not self._salaries.update_amounts(salary_id=existing.salary_id, computation=computation):
            raise ConflictError(
                f"Salary for teacher {existing.teacher_id} in {existing.month:%Y-%m} is already paid"
            )
        return existing.salary_id

    def generate_monthly_salaries(self, year: int, month: int) -> BatchResult:
        """Generate for every active teacher; one teacher's failure does not stop the rest."""
        if not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")
        target = date(int(year), int(month), 1)

        generated: list[SalaryRecord] = []
        errors: list[dict] = []
        for teacher in self._teachers.list_active():
            try:
                generated.append(self.generate_monthly_salary(teacher.teacher_id, target))
            except DomainError as e:
                logger.warning("Salary generation skipped for teacher %s: %s", teacher.teacher_id, e)
                errors.append({"teacher_id": teacher.teacher_id, "error": str(e)})

        return BatchResult(generated=generated, errors=errors)

    def recalculate_salary_for_month(self, teacher_id: int, when: datetime) -> None:
        """Refresh an existing, unpaid record after a lesson action changes.

        Never creates a record and never raises: the lesson update must not fail
        because of payroll.
        """
        month = month_start(when.date() if isinstance(when, datetime) else when)
        try:
            existing = self._salaries.get_for_teacher_month(teacher_id=int(teacher_id), month=month)
            if not existing:
                return
            if existing.status == SalaryStatus.PAID:
                logger.info("Salary for teacher %s in %s is paid; not recalculating", teacher_id, f"{month:%Y-%m}")
                return
            self.generate_monthly_salary(int(teacher_id), month)
        except Exception:
            logger.exception("Failed to recalculate salary for teacher %s, month %s", teacher_id, f"{month:%Y-%m}")

    def get_salary_record(self, salary_id: int) -> SalaryRecord:
        record = self._salaries.get_by_id(int(salary_id))
        if not record:
            raise NotFoundError(f"Salary record with ID {salary_id} not found")
        return record

    def list_salary_records(
        self,
        *,
        teacher_id: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[SalaryRecord]:
        return self._salaries.list_records(teacher_id=teacher_id, status=status, limit=limit)

    def change_status(
        self,
        salary_id: int,
        new_status: SalaryStatus,
        *,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SalaryRecord:
        record = self.get_salary_record(salary_id)
        if record.status == SalaryStatus.PAID:
            raise ConflictError("Salary is already paid")
        if new_status not in _ALLOWED_TRANSITIONS[record.status]:
            raise ValidationError(f"Cannot change salary status from {record.status.value} to {new_status.value}")

        paid_at = (now or now_local()) if new_status == SalaryStatus.PAID else None
        ok = self._salaries.update_status(
            salary_id=record.salary_id,
            from_status=record.status,
            to_status=new_status,
            paid_at=paid_at,
            notes=(notes or "").strip() or None,
        )
        if not ok:
            raise ConflictError("Salary record was changed by another request")

        logger.info("Salary %s status %s -> %s", record.salary_id, record.status.value, new_status.value)
        return self.get_salary_record(record.salary_id)

    def get_salary_breakdown(self, teacher_id: int, month: str) -> SalaryBreakdown:
        """Per-lesson rows for a YYYY-MM month, using the same inputs as generation."""
        month_date = parse_month(month)
        teacher = self._get_teacher(teacher_id)
        config = self._settings.get_penalty_config()

        other_by_lesson: dict[int, int] = defaultdict(int)
        for d in self._month_deductions(teacher.teacher_id, month_date):
            if d.lesson_id is not None:
                other_by_lesson[d.lesson_id] += d.amount

        rate = teacher.effective_lesson_rate
        rows = [
            LessonSalaryRow(
                lesson_id=lesson.lesson_id,
                lesson_name=lesson.display_name,
                lesson_date=lesson.scheduled_at,
                obligation_completed=lesson.completed_actions,
                obligation_total=ACTIONS_PER_LESSON,
                salary=rate,
                penalty=self._calculator.lesson_penalty(lesson, config),
                other_deduction=other_by_lesson.get(lesson.lesson_id, 0),
            )
            for lesson in self._month_lessons(teacher.teacher_id, month_date)
        ]
        return SalaryBreakdown(
            teacher_id=teacher.teacher_id,
            teacher_name=teacher.full_name,
            month=month_date,
            lessons=rows,
        )

    def get_teacher_salary_summary(self, teacher_id: int) -> dict:
        teacher = self._get_teacher(teacher_id)
        records = self._salaries.list_records(teacher_id=teacher.teacher_id, limit=None)
        deductions = self._deductions.list_for_teacher(teacher_id=teacher.teacher_id)

        def bucket(items) -> dict:
            items = list(items)
            return {"count": len(items), "amount": sum(r.net_amount for r in items)}

        return {
            "teacher_id": teacher.teacher_id,
            "total": bucket(records),
            "paid": bucket(r for r in records if r.status == SalaryStatus.PAID),
            "pending": bucket(r for r in records if r.status == SalaryStatus.PENDING),
            "processing": bucket(r for r in records if r.status == SalaryStatus.PROCESSING),
            "deductions": {"count": len(deductions), "amount": sum(d.amount for d in deductions)},
        }

    def add_deduction(
        self,
        *,
        teacher_id: int,
        amount,
        reason: DeductionReason = DeductionReason.OTHER,
        lesson_id: Optional[int] = None,
        note: Optional[str] = None,
        applied_at: Optional[datetime] = None,
    ) -> int:
        teacher = self._get_teacher(teacher_id)
        amount = require_positive_int(amount, "amount")
        if lesson_id is not None:
            lesson = self._lessons.get_by_id(int(lesson_id))
            if not lesson or lesson.teacher_id != teacher.teacher_id:
                raise NotFoundError(f"Lesson with ID {lesson_id} not found for teacher {teacher.teacher_id}")

        deduction_id = self._deductions.create(
            teacher_id=teacher.teacher_id,
            amount=amount,
            reason=reason,
            applied_at=applied_at or now_local(),
            lesson_id=int(lesson_id) if lesson_id is not None else None,
            note=(note or "").strip() or None,
        )
        logger.info("Deduction %s added for teacher %s: %s AMD (%s)", deduction_id, teacher.teacher_id, amount, reason.value)
        return deduction_id
