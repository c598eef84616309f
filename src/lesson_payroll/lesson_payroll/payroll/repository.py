from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import DeductionReason, SalaryStatus
from .model import Deduction, SalaryComputation, SalaryRecord


class SalaryRecordRepository(Protocol):
    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def get_for_teacher_month(self, *, teacher_id: int, month: date) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def create(self, *, teacher_id: int, month: date, computation: SalaryComputation) -> int:
        """Insert a PENDING record.

        (teacher_id, month) is unique; a second insert raises DuplicateRecordError.
        """

        raise NotImplementedError

    def update_amounts(self, *, salary_id: int, computation: SalaryComputation) -> bool:
        """Overwrite derived amounts; returns False (and changes nothing) when the record is PAID."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        salary_id: int,
        from_status: SalaryStatus,
        to_status: SalaryStatus,
        paid_at: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Compare-and-set on status; False when the stored status is not ``from_status``."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        teacher_id: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[SalaryRecord]:
        """Most recent month first; ``limit=None`` returns every matching record."""

        raise NotImplementedError


class DeductionRepository(Protocol):
    def create(
        self,
        *,
        teacher_id: int,
        amount: int,
        reason: DeductionReason,
        applied_at: datetime,
        lesson_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_teacher(
        self,
        *,
        teacher_id: int,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Sequence[Deduction]:
        raise NotImplementedError
