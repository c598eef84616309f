from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for route authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"


class LessonStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    MISSED = "MISSED"
    REPLACED = "REPLACED"


class LessonAction(str, Enum):
    """The four per-lesson teacher obligations, in display order."""

    ABSENCE = "absence"
    FEEDBACKS = "feedbacks"
    VOICE = "voice"
    TEXT = "text"


class SalaryStatus(str, Enum):
    """Salary record lifecycle. PAID is terminal."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    PAID = "PAID"


class DeductionReason(str, Enum):
    MISSING_FEEDBACK = "MISSING_FEEDBACK"
    MISSING_VOCABULARY = "MISSING_VOCABULARY"
    LATE_SUBMISSION = "LATE_SUBMISSION"
    OTHER = "OTHER"
