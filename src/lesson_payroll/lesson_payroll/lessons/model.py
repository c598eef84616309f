from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import ACTIONS_PER_LESSON
from ..core.enums import LessonAction, LessonStatus


@dataclass(frozen=True)
class Lesson:
    """Domain entity: one scheduled lesson and its obligation flags."""

    lesson_id: int
    teacher_id: int
    group_id: int
    scheduled_at: datetime
    status: LessonStatus
    absence_marked: bool = False
    feedbacks_completed: bool = False
    voice_sent: bool = False
    text_sent: bool = False
    absence_marked_at: Optional[datetime] = None
    feedbacks_completed_at: Optional[datetime] = None
    voice_sent_at: Optional[datetime] = None
    text_sent_at: Optional[datetime] = None
    topic: Optional[str] = None
    group_name: Optional[str] = None
    duration_minutes: int = 60

    def is_done(self, action: LessonAction) -> bool:
        if action is LessonAction.ABSENCE:
            return self.absence_marked
        if action is LessonAction.FEEDBACKS:
            return self.feedbacks_completed
        if action is LessonAction.VOICE:
            return self.voice_sent
        if action is LessonAction.TEXT:
            return self.text_sent
        raise ValueError(f"Unknown lesson action: {action!r}")

    @property
    def completed_actions(self) -> int:
        return sum(1 for action in LessonAction if self.is_done(action))

    @property
    def display_name(self) -> str:
        return self.topic or self.group_name or "Untitled Lesson"


@dataclass(frozen=True)
class LessonObligation:
    """Read-model: which of the four actions are done for a single lesson."""

    lesson_id: int
    absence_done: bool
    feedbacks_done: bool
    voice_done: bool
    text_done: bool
    completed_actions_count: int
    total_actions: int = ACTIONS_PER_LESSON

    @classmethod
    def from_lesson(cls, lesson: Lesson) -> "LessonObligation":
        return cls(
            lesson_id=lesson.lesson_id,
            absence_done=lesson.absence_marked,
            feedbacks_done=lesson.feedbacks_completed,
            voice_done=lesson.voice_sent,
            text_done=lesson.text_sent,
            completed_actions_count=lesson.completed_actions,
        )

    def to_dict(self) -> dict:
        return {
            "lesson_id": self.lesson_id,
            "absence_done": self.absence_done,
            "feedbacks_done": self.feedbacks_done,
            "voice_done": self.voice_done,
            "text_done": self.text_done,
            "completed_actions_count": self.completed_actions_count,
            "total_actions": self.total_actions,
        }
