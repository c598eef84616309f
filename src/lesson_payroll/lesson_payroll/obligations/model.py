from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ..core.enums import LessonAction


@dataclass(frozen=True)
class ObligationItem:
    """Derived, not persisted: how consistently one action was completed."""

    action: LessonAction
    total_count: int
    completed_count: int
    done: bool

    @property
    def ratio(self) -> float:
        if self.total_count == 0:
            return 1.0
        return self.completed_count / self.total_count

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "total_count": self.total_count,
            "completed_count": self.completed_count,
            "ratio": round(self.ratio, 4),
            "done": self.done,
        }


@dataclass(frozen=True)
class TeacherObligation:
    teacher_id: int
    date_from: datetime
    date_to: datetime
    items: Sequence[ObligationItem]

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def completed(self) -> int:
        return sum(1 for item in self.items if item.done)

    def to_dict(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "date_from": self.date_from.isoformat(),
            "date_to": self.date_to.isoformat(),
            "total": self.total,
            "completed": self.completed,
            "items": [item.to_dict() for item in self.items],
        }
