from __future__ import annotations

from typing import Iterable

from ...core.enums import LessonAction
from ...lessons.model import Lesson
from ...settings.model import PenaltyConfig
from ..model import PenaltyBreakdown
from .base import DeductionCalculator


class FixedPenaltyCalculator(DeductionCalculator):
    """Every missed action on every lesson costs its configured AMD amount.

    Deliberately independent of the 80% obligation threshold.
    """

    def lesson_penalty(self, lesson: Lesson, config: PenaltyConfig) -> int:
        return sum(config.amount_for(action) for action in LessonAction if not lesson.is_done(action))

    def calculate(self, lessons: Iterable[Lesson], config: PenaltyConfig) -> PenaltyBreakdown:
        amounts = {action: 0 for action in LessonAction}
        missed = {action: 0 for action in LessonAction}

        for lesson in lessons:
            for action in LessonAction:
                if not lesson.is_done(action):
                    missed[action] += 1
                    amounts[action] += config.amount_for(action)

        return PenaltyBreakdown(amounts=amounts, missed=missed)
