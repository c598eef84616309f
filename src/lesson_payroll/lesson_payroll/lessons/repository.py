from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LessonAction, LessonStatus
from .model import Lesson


class LessonRepository(Protocol):
    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        raise NotImplementedError

    def list_lessons(
        self,
        *,
        teacher_id: int,
        date_from: datetime,
        date_to: datetime,
        status: Optional[LessonStatus] = None,
    ) -> Sequence[Lesson]:
        """Lessons whose scheduled_at falls in [date_from, date_to], ordered by scheduled_at."""

        raise NotImplementedError

    def list_by_ids(self, lesson_ids: Sequence[int], *, status: Optional[LessonStatus] = None) -> Sequence[Lesson]:
        raise NotImplementedError

    def mark_action(self, *, lesson_id: int, action: LessonAction, at: datetime) -> bool:
        raise NotImplementedError

    def change_status(self, *, lesson_ids: Sequence[int], from_status: LessonStatus, to_status: LessonStatus) -> int:
        """Return the number of lessons updated."""

        raise NotImplementedError
