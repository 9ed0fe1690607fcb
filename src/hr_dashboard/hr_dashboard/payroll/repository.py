from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import SalaryStatus
from .model import EmployeeSummary, NewSalaryRecord, SalaryFilters, SalaryRecord


class SalaryRecordRepository(Protocol):
    """Repository interface for SalaryRecord.

    Ownership is transitive: a record belongs to the account that owns its employee.
    The storage layer enforces one record per (employee_id, month, year).
    """

    def find_owned(self, *, account_id: int, record_id: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def find_by_period(self, *, employee_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def list_for_period(self, *, account_id: int, month: int, year: int) -> Sequence[SalaryRecord]:
        raise NotImplementedError

    def insert_if_absent(self, data: NewSalaryRecord) -> Optional[SalaryRecord]:
        """Insert and return the stored row, or None when the period is already taken."""

        raise NotImplementedError

    def update_amounts(
        self,
        record_id: int,
        *,
        bonus: Decimal,
        deductions: Decimal,
        allowances: Decimal,
        overtime_hours: Decimal,
        overtime_rate: Decimal,
        total_salary: Decimal,
        notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_status(self, record_id: int, *, status: SalaryStatus, processed_at: Optional[datetime]) -> bool:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError

    def list_with_employees(
        self, *, account_id: int, filters: SalaryFilters
    ) -> Sequence[tuple[SalaryRecord, EmployeeSummary]]:
        """Sorted by year desc, month desc, employee name asc."""

        raise NotImplementedError

    def period_totals(self, *, account_id: int, month: int, year: int) -> tuple[int, Decimal]:
        """(record count, sum of total_salary) for one period."""

        raise NotImplementedError

    def count_by_status(self, *, account_id: int, status: SalaryStatus) -> int:
        raise NotImplementedError

    def count_employees_with_records(self, *, account_id: int) -> int:
        raise NotImplementedError
