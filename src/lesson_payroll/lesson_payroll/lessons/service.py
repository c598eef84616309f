from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import LessonAction, LessonStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Lesson, LessonObligation
from .repository import LessonRepository

logger = logging.getLogger(__name__)


class SalaryRecalculator(Protocol):
    def recalculate_salary_for_month(self, teacher_id: int, when: datetime) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class ExcludeResult:
    count: int
    lesson_ids: list[int]


class LessonService:
    def __init__(self, lessons: LessonRepository, *, salaries: Optional[SalaryRecalculator] = None):
        self._lessons = lessons
        self._salaries = salaries

    def get_lesson(self, lesson_id: int) -> Lesson:
        lesson = self._lessons.get_by_id(int(lesson_id))
        if not lesson:
            raise NotFoundError(f"Lesson with ID {lesson_id} not found")
        return lesson

    def list_lessons(
        self,
        *,
        teacher_id: int,
        date_from: datetime,
        date_to: datetime,
        status: Optional[LessonStatus] = None,
    ) -> Sequence[Lesson]:
        if date_to < date_from:
            raise ValidationError("date_to must be >= date_from")
        return self._lessons.list_lessons(teacher_id=int(teacher_id), date_from=date_from, date_to=date_to, status=status)

    def get_lesson_obligation(self, lesson_id: int) -> LessonObligation:
        return LessonObligation.from_lesson(self.get_lesson(lesson_id))

    def mark_action(self, lesson_id: int, action: LessonAction, *, now: Optional[datetime] = None) -> Lesson:
        """Mark one obligation as done; a first completion refreshes the month's salary."""
        now = now or now_local()
        lesson = self.get_lesson(lesson_id)
        was_done = lesson.is_done(action)

        if not self._lessons.mark_action(lesson_id=lesson.lesson_id, action=action, at=now):
            raise NotFoundError(f"Lesson with ID {lesson_id} not found")

        if not was_done and self._salaries is not None:
            self._salaries.recalculate_salary_for_month(lesson.teacher_id, lesson.scheduled_at)

        return self.get_lesson(lesson.lesson_id)

    def exclude_lessons_from_salary(self, lesson_ids: Sequence[int]) -> ExcludeResult:
        """Move COMPLETED lessons to CANCELLED so salary generation skips them."""
        if not lesson_ids:
            raise ValidationError("Lesson IDs array is required and cannot be empty")

        try:
            ids = list(dict.fromkeys(int(i) for i in lesson_ids))
        except (TypeError, ValueError):
            raise ValidationError("Lesson IDs must be integers")
        found = {lesson.lesson_id for lesson in self._lessons.list_by_ids(ids, status=LessonStatus.COMPLETED)}
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFoundError(
                "Some lessons not found or not completed: " + ", ".join(str(i) for i in missing)
            )

        count = self._lessons.change_status(
            lesson_ids=ids,
            from_status=LessonStatus.COMPLETED,
            to_status=LessonStatus.CANCELLED,
        )
        logger.info("Excluded %d lesson(s) from salary: %s", count, ids)
        return ExcludeResult(count=count, lesson_ids=ids)
