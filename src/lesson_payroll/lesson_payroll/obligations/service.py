from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import month_bounds, now_local
from ..core.enums import LessonStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..lessons.repository import LessonRepository
from ..teachers.repository import TeacherRepository
from .evaluator import ObligationEvaluator
from .model import TeacherObligation


class TeacherObligationService:
    def __init__(
        self,
        teachers: TeacherRepository,
        lessons: LessonRepository,
        *,
        evaluator: Optional[ObligationEvaluator] = None,
    ):
        self._teachers = teachers
        self._lessons = lessons
        self._evaluator = evaluator or ObligationEvaluator()

    def get_teacher_obligation(
        self,
        teacher_id: int,
        *,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> TeacherObligation:
        """Compliance over the teacher's COMPLETED lessons; defaults to the current month."""
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise NotFoundError(f"Teacher with ID {teacher_id} not found")

        default_from, default_to = month_bounds((now or now_local()).date())
        date_from = date_from or default_from
        date_to = date_to or default_to
        if date_to < date_from:
            raise ValidationError("date_to must be >= date_from")

        lessons = self._lessons.list_lessons(
            teacher_id=teacher.teacher_id,
            date_from=date_from,
            date_to=date_to,
            status=LessonStatus.COMPLETED,
        )
        return TeacherObligation(
            teacher_id=teacher.teacher_id,
            date_from=date_from,
            date_to=date_to,
            items=self._evaluator.evaluate(lessons),
        )
