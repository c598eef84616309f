from __future__ import annotations

from typing import Iterable

from ..core.constants import OBLIGATION_DONE_THRESHOLD
from ..core.enums import LessonAction
from ..lessons.model import Lesson
from .model import ObligationItem


class ObligationEvaluator:
    """Threshold rule: an action is done when completed/total >= threshold (inclusive).

    With no applicable lessons every action is vacuously done. This drives the
    compliance display only; salary penalties are charged per missed action by
    the payroll calculators regardless of this outcome.
    """

    def __init__(self, *, threshold: float = OBLIGATION_DONE_THRESHOLD):
        if not 0 <= threshold <= 1:
            raise ValueError(f"threshold must be within [0, 1], got {threshold!r}")
        self._threshold = float(threshold)

    @property
    def threshold(self) -> float:
        return self._threshold

    def evaluate(self, lessons: Iterable[Lesson]) -> list[ObligationItem]:
        lessons = list(lessons)
        total = len(lessons)

        items = []
        for action in LessonAction:
            completed = sum(1 for lesson in lessons if lesson.is_done(action))
            done = total == 0 or completed / total >= self._threshold
            items.append(ObligationItem(action=action, total_count=total, completed_count=completed, done=done))
        return items
