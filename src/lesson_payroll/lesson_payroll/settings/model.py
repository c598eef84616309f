from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import LessonAction


@dataclass(frozen=True)
class PenaltyConfig:
    """Fixed AMD penalty per missed action. Values are validated on write."""

    penalty_absence_amd: int
    penalty_feedback_amd: int
    penalty_voice_amd: int
    penalty_text_amd: int

    @classmethod
    def uniform(cls, amount: int) -> "PenaltyConfig":
        return cls(amount, amount, amount, amount)

    def amount_for(self, action: LessonAction) -> int:
        if action is LessonAction.ABSENCE:
            return self.penalty_absence_amd
        if action is LessonAction.FEEDBACKS:
            return self.penalty_feedback_amd
        if action is LessonAction.VOICE:
            return self.penalty_voice_amd
        if action is LessonAction.TEXT:
            return self.penalty_text_amd
        raise ValueError(f"Unknown lesson action: {action!r}")

    def to_dict(self) -> dict:
        return {
            "penalty_absence_amd": self.penalty_absence_amd,
            "penalty_feedback_amd": self.penalty_feedback_amd,
            "penalty_voice_amd": self.penalty_voice_amd,
            "penalty_text_amd": self.penalty_text_amd,
        }
