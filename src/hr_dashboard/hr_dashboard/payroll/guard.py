from __future__ import annotations

from typing import Optional

from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import SalaryRecord
from .repository import SalaryRecordRepository

DUPLICATE_PERIOD_MESSAGE = "Salary record already exists for this month/year"


class ScopeGuard:
    """Read-only checks that keep payroll operations inside the acting account.

    A missing target and one owned by another account raise the same ``NotFoundError``.
    ``assert_no_existing_record`` is a fast path only; the storage constraint is authoritative.
    """

    def __init__(self, employees: EmployeeRepository, records: SalaryRecordRepository):
        self._employees = employees
        self._records = records

    @staticmethod
    def require_account(account_id: Optional[int]) -> int:
        if not account_id:
            raise UnauthorizedError("Authentication required")
        return int(account_id)

    def assert_owns_employee(self, account_id: int, employee_id: int) -> Employee:
        employee = self._employees.find_owned(account_id=account_id, employee_id=int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def assert_owns_record(self, account_id: int, record_id: int) -> SalaryRecord:
        record = self._records.find_owned(account_id=account_id, record_id=int(record_id))
        if not record:
            raise NotFoundError("Salary record not found")
        return record

    def assert_no_existing_record(self, employee_id: int, month: int, year: int) -> None:
        if self._records.find_by_period(employee_id=int(employee_id), month=int(month), year=int(year)):
            raise ConflictError(DUPLICATE_PERIOD_MESSAGE, field="month")
