from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from types import SimpleNamespace
from typing import Optional

import pytest

from src.lesson_payroll.lesson_payroll.container import wire_services
from src.lesson_payroll.lesson_payroll.core.enums import LessonAction, LessonStatus, SalaryStatus
from src.lesson_payroll.lesson_payroll.core.exceptions import DuplicateRecordError
from src.lesson_payroll.lesson_payroll.lessons.model import Lesson
from src.lesson_payroll.lesson_payroll.payroll.model import Deduction, SalaryRecord
from src.lesson_payroll.lesson_payroll.settings.model import PenaltyConfig
from src.lesson_payroll.lesson_payroll.teachers.model import Teacher

_FLAG_FIELDS = {
    LessonAction.ABSENCE: ("absence_marked", "absence_marked_at"),
    LessonAction.FEEDBACKS: ("feedbacks_completed", "feedbacks_completed_at"),
    LessonAction.VOICE: ("voice_sent", "voice_sent_at"),
    LessonAction.TEXT: ("text_sent", "text_sent_at"),
}


class FakeTeachersRepo:
    def __init__(self, teachers=()):
        self.by_id = {t.teacher_id: t for t in teachers}

    def add(self, teacher: Teacher) -> Teacher:
        self.by_id[teacher.teacher_id] = teacher
        return teacher

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self.by_id.get(int(teacher_id))

    def list_active(self):
        return [t for t in self.by_id.values() if t.is_active]


class FakeLessonsRepo:
    def __init__(self):
        self.by_id: dict[int, Lesson] = {}
        self.list_calls: list[dict] = []

    def add(self, lesson: Lesson) -> Lesson:
        self.by_id[lesson.lesson_id] = lesson
        return lesson

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        return self.by_id.get(int(lesson_id))

    def list_lessons(self, *, teacher_id, date_from, date_to, status=None):
        self.list_calls.append({"teacher_id": teacher_id, "date_from": date_from, "date_to": date_to, "status": status})
        items = [
            lesson
            for lesson in self.by_id.values()
            if lesson.teacher_id == teacher_id
            and date_from <= lesson.scheduled_at <= date_to
            and (status is None or lesson.status == status)
        ]
        return sorted(items, key=lambda lesson: (lesson.scheduled_at, lesson.lesson_id))

    def list_by_ids(self, lesson_ids, *, status=None):
        return [
            self.by_id[i]
            for i in lesson_ids
            if i in self.by_id and (status is None or self.by_id[i].status == status)
        ]

    def mark_action(self, *, lesson_id, action, at):
        lesson = self.by_id.get(int(lesson_id))
        if not lesson:
            return False
        flag, at_field = _FLAG_FIELDS[action]
        self.by_id[lesson.lesson_id] = replace(lesson, **{flag: True, at_field: at})
        return True

    def change_status(self, *, lesson_ids, from_status, to_status):
        count = 0
        for i in lesson_ids:
            lesson = self.by_id.get(i)
            if lesson and lesson.status == from_status:
                self.by_id[i] = replace(lesson, status=to_status)
                count += 1
        return count


class FakeSettingsRepo:
    def __init__(self, config: Optional[PenaltyConfig] = None):
        self.config = config

    def get_penalty_config(self):
        return self.config

    def save_penalty_config(self, config: PenaltyConfig) -> None:
        self.config = config


class FakeSalariesRepo:
    def __init__(self):
        self.by_id: dict[int, SalaryRecord] = {}
        self._next_id = 1

    def get_by_id(self, salary_id):
        return self.by_id.get(int(salary_id))

    def get_for_teacher_month(self, *, teacher_id, month):
        for r in self.by_id.values():
            if r.teacher_id == teacher_id and r.month == month:
                return r
        return None

    @staticmethod
    def _amounts(c) -> dict:
        return {
            "lessons_count": c.lessons_count,
            "gross_amount": c.gross_amount,
            "absence_penalty_amd": c.penalties.amount_for(LessonAction.ABSENCE),
            "feedback_penalty_amd": c.penalties.amount_for(LessonAction.FEEDBACKS),
            "voice_penalty_amd": c.penalties.amount_for(LessonAction.VOICE),
            "text_penalty_amd": c.penalties.amount_for(LessonAction.TEXT),
            "penalty_deductions": c.penalty_deductions,
            "other_deductions": c.other_deductions,
            "total_deductions": c.total_deductions,
            "net_amount": c.net_amount,
        }

    def create(self, *, teacher_id, month, computation):
        if self.get_for_teacher_month(teacher_id=teacher_id, month=month):
            raise DuplicateRecordError(f"Salary record for teacher {teacher_id} in {month:%Y-%m} already exists")
        salary_id = self._next_id
        self._next_id += 1
        self.by_id[salary_id] = SalaryRecord(
            salary_id=salary_id,
            teacher_id=teacher_id,
            month=month,
            status=SalaryStatus.PENDING,
            **self._amounts(computation),
        )
        return salary_id

    def update_amounts(self, *, salary_id, computation):
        r = self.by_id.get(int(salary_id))
        if not r or r.status == SalaryStatus.PAID:
            return False
        self.by_id[r.salary_id] = replace(r, **self._amounts(computation))
        return True

    def update_status(self, *, salary_id, from_status, to_status, paid_at=None, notes=None):
        r = self.by_id.get(int(salary_id))
        if not r or r.status != from_status:
            return False
        self.by_id[r.salary_id] = replace(r, status=to_status, paid_at=paid_at or r.paid_at, notes=notes or r.notes)
        return True

    def list_records(self, *, teacher_id=None, status=None, limit=200):
        items = [
            r
            for r in self.by_id.values()
            if (teacher_id is None or r.teacher_id == teacher_id) and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (r.month, -r.teacher_id), reverse=True)
        return items[:limit]


class FakeDeductionsRepo:
    def __init__(self):
        self.items: list[Deduction] = []

    def create(self, *, teacher_id, amount, reason, applied_at, lesson_id=None, note=None):
        deduction_id = len(self.items) + 1
        self.items.append(
            Deduction(
                deduction_id=deduction_id,
                teacher_id=teacher_id,
                amount=amount,
                reason=reason,
                applied_at=applied_at,
                lesson_id=lesson_id,
                note=note,
            )
        )
        return deduction_id

    def list_for_teacher(self, *, teacher_id, date_from=None, date_to=None):
        return [
            d
            for d in self.items
            if d.teacher_id == teacher_id
            and (date_from is None or d.applied_at >= date_from)
            and (date_to is None or d.applied_at <= date_to)
        ]


@pytest.fixture
def make_lesson():
    counter = {"id": 0}

    def _make(
        *,
        teacher_id: int = 1,
        scheduled_at: datetime = datetime(2026, 1, 10, 18, 0),
        status: LessonStatus = LessonStatus.COMPLETED,
        absence: bool = True,
        feedbacks: bool = True,
        voice: bool = True,
        text: bool = True,
        **extra,
    ) -> Lesson:
        counter["id"] += 1
        return Lesson(
            lesson_id=extra.pop("lesson_id", counter["id"]),
            teacher_id=teacher_id,
            group_id=extra.pop("group_id", 1),
            scheduled_at=scheduled_at,
            status=status,
            absence_marked=absence,
            feedbacks_completed=feedbacks,
            voice_sent=voice,
            text_sent=text,
            **extra,
        )

    return _make


@pytest.fixture
def repos():
    return SimpleNamespace(
        teachers=FakeTeachersRepo(
            [
                Teacher(teacher_id=1, full_name="Anna Petrosyan", lesson_rate_amd=5000),
                Teacher(teacher_id=2, full_name="Davit Hakobyan", lesson_rate_amd=None, hourly_rate=4000),
            ]
        ),
        lessons=FakeLessonsRepo(),
        settings=FakeSettingsRepo(PenaltyConfig.uniform(1000)),
        salaries=FakeSalariesRepo(),
        deductions=FakeDeductionsRepo(),
    )


@pytest.fixture
def container(repos):
    return wire_services(
        teachers_repo=repos.teachers,
        lessons_repo=repos.lessons,
        settings_repo=repos.settings,
        salaries_repo=repos.salaries,
        deductions_repo=repos.deductions,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.lesson_payroll.lesson_payroll.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["role"] = "admin"
        sess["user_id"] = 100
    return client
