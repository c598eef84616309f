from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    teacher_id: int
    full_name: str
    lesson_rate_amd: Optional[int]
    hourly_rate: int = 0
    is_active: bool = True

    @property
    def effective_lesson_rate(self) -> int:
        """Fixed price per lesson; legacy hourly_rate (1 hour = 1 lesson) when unset."""
        if self.lesson_rate_amd:
            return int(self.lesson_rate_amd)
        return int(self.hourly_rate or 0)
