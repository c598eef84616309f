from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...lessons.model import Lesson
from ...settings.model import PenaltyConfig
from ..model import PenaltyBreakdown


class DeductionCalculator(ABC):
    """Calculator interface (Strategy Pattern for salary deductions)."""

    @abstractmethod
    def lesson_penalty(self, lesson: Lesson, config: PenaltyConfig) -> int:
        raise NotImplementedError

    @abstractmethod
    def calculate(self, lessons: Iterable[Lesson], config: PenaltyConfig) -> PenaltyBreakdown:
        raise NotImplementedError
