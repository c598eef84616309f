from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_PENALTY_AMD, OBLIGATION_DONE_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .lessons.repository import LessonRepository
from .lessons.service import LessonService
from .obligations.evaluator import ObligationEvaluator
from .obligations.service import TeacherObligationService
from .payroll.mysql_salary_repository import MySQLDeductionRepository, MySQLSalaryRecordRepository
from .payroll.repository import DeductionRepository, SalaryRecordRepository
from .payroll.service import SalaryService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository


@dataclass(frozen=True)
class Container:
    teachers_repo: TeacherRepository
    lessons_repo: LessonRepository
    settings_repo: SettingsRepository
    salaries_repo: SalaryRecordRepository
    deductions_repo: DeductionRepository

    settings_service: SettingsService
    obligation_service: TeacherObligationService
    salary_service: SalaryService
    lesson_service: LessonService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    teachers_repo: TeacherRepository,
    lessons_repo: LessonRepository,
    settings_repo: SettingsRepository,
    salaries_repo: SalaryRecordRepository,
    deductions_repo: DeductionRepository,
    obligation_threshold: float = OBLIGATION_DONE_THRESHOLD,
    default_penalty_amd: int = DEFAULT_PENALTY_AMD,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""
    settings_service = SettingsService(settings_repo, default_penalty_amd=default_penalty_amd)
    obligation_service = TeacherObligationService(
        teachers_repo,
        lessons_repo,
        evaluator=ObligationEvaluator(threshold=obligation_threshold),
    )
    salary_service = SalaryService(teachers_repo, lessons_repo, salaries_repo, deductions_repo, settings_service)
    lesson_service = LessonService(lessons_repo, salaries=salary_service)

    return Container(
        teachers_repo=teachers_repo,
        lessons_repo=lessons_repo,
        settings_repo=settings_repo,
        salaries_repo=salaries_repo,
        deductions_repo=deductions_repo,
        settings_service=settings_service,
        obligation_service=obligation_service,
        salary_service=salary_service,
        lesson_service=lesson_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    obligation_threshold: float = OBLIGATION_DONE_THRESHOLD,
    default_penalty_amd: int = DEFAULT_PENALTY_AMD,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return wire_services(
        teachers_repo=MySQLTeacherRepository(conn),
        lessons_repo=MySQLLessonRepository(conn),
        settings_repo=MySQLSettingsRepository(conn, default_amd=default_penalty_amd),
        salaries_repo=MySQLSalaryRecordRepository(conn),
        deductions_repo=MySQLDeductionRepository(conn),
        obligation_threshold=obligation_threshold,
        default_penalty_amd=default_penalty_amd,
        conn=conn,
    )
