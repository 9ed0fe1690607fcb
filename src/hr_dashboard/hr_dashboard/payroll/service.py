from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import current_period, now_local
from ..common.money import round_money
from ..common.patch import is_set
from ..common.validators import optional_text, require_amount, require_int_range, require_max_length
from ..core.constants import (
    MAX_NOTES_LENGTH,
    MAX_OVERTIME_HOURS,
    MAX_PAYROLL_YEAR,
    MAX_SALARY_AMOUNT,
    MIN_PAYROLL_YEAR,
)
from ..core.enums import SalaryStatus
from ..core.exceptions import ConflictError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .guard import DUPLICATE_PERIOD_MESSAGE, ScopeGuard
from .model import (
    EmployeeSummary,
    NewSalaryRecord,
    PayrollStats,
    SalaryFilters,
    SalaryInput,
    SalaryPatch,
    SalaryRecord,
    SalaryRecordView,
)
from .repository import SalaryRecordRepository

logger = logging.getLogger(__name__)


def clean_month(value) -> int:
    return require_int_range(value, "month", 1, 12)


def clean_year(value) -> int:
    return require_int_range(value, "year", MIN_PAYROLL_YEAR, MAX_PAYROLL_YEAR)


def _clean_notes(value: Optional[str]) -> Optional[str]:
    return require_max_length(optional_text(value), "notes", MAX_NOTES_LENGTH)


def _clean_amount(value, field_name: str) -> Decimal:
    maximum = MAX_OVERTIME_HOURS if field_name == "overtime_hours" else MAX_SALARY_AMOUNT
    return require_amount(value, field_name, maximum=maximum)


def _clean_total(net_salary: Decimal) -> Decimal:
    total = round_money(net_salary)
    if abs(total) > MAX_SALARY_AMOUNT:
        message = f"Total salary cannot exceed {MAX_SALARY_AMOUNT:,}"
        raise ValidationError(message, errors={"total_salary": message})
    return total


def _clean_employee_id(value) -> int:
    if value is None or value == "":
        raise ValidationError("Employee is required", errors={"employee_id": "Employee is required"})
    return require_int_range(value, "employee_id", 1, 2_147_483_647)


def _clean_status(value) -> Optional[SalaryStatus]:
    if value is None or value == "":
        return None
    try:
        return SalaryStatus(value)
    except ValueError:
        raise ValidationError("Invalid status", errors={"status": "Status must be one of DRAFT, APPROVED, PAID"})


def employee_summary(employee: Employee) -> EmployeeSummary:
    return EmployeeSummary(
        employee_id=employee.employee_id,
        employee_code=employee.employee_code,
        name=employee.name,
        department=employee.department,
        position=employee.position,
        basic_salary=employee.basic_salary,
    )


def to_view(record: SalaryRecord, employee: EmployeeSummary, calculator: PayrollCalculator) -> SalaryRecordView:
    """Annotate a stored record with totals recomputed from its own snapshot values."""

    calc = calculator.calculate(
        record.basic_salary,
        bonus=record.bonus,
        deductions=record.deductions,
        allowances=record.allowances,
        overtime_hours=record.overtime_hours,
        overtime_rate=record.overtime_rate,
    )
    return SalaryRecordView(
        record=record,
        employee=employee,
        gross_salary=calc.gross_salary,
        total_deductions=calc.total_deductions,
        net_salary=calc.net_salary,
    )


class PayrollService:
    """Use cases: lifecycle of salary records (create, update, approve, delete, list, stats).

    Every operation takes the acting ``account_id`` first; nothing is read from ambient state.
    """

    def __init__(
        self,
        records: SalaryRecordRepository,
        employees: EmployeeRepository,
        *,
        guard: Optional[ScopeGuard] = None,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._records = records
        self._employees = employees
        self._guard = guard or ScopeGuard(employees, records)
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def _view(self, account_id: int, record: SalaryRecord) -> SalaryRecordView:
        employee = self._guard.assert_owns_employee(account_id, record.employee_id)
        return to_view(record, employee_summary(employee), self._calculator)

    def create_record(self, account_id: Optional[int], data: SalaryInput) -> SalaryRecordView:
        account_id = self._guard.require_account(account_id)
        month = clean_month(data.month)
        year = clean_year(data.year)
        bonus = _clean_amount(data.bonus, "bonus")
        deductions = _clean_amount(data.deductions, "deductions")
        allowances = _clean_amount(data.allowances, "allowances")
        overtime_hours = _clean_amount(data.overtime_hours, "overtime_hours")
        overtime_rate = _clean_amount(data.overtime_rate, "overtime_rate")
        notes = _clean_notes(data.notes)

        employee = self._guard.assert_owns_employee(account_id, _clean_employee_id(data.employee_id))
        self._guard.assert_no_existing_record(employee.employee_id, month, year)

        calc = self._calculator.calculate(
            employee.basic_salary,
            bonus=bonus,
            deductions=deductions,
            allowances=allowances,
            overtime_hours=overtime_hours,
            overtime_rate=overtime_rate,
        )
        record = self._records.insert_if_absent(
            NewSalaryRecord(
                employee_id=employee.employee_id,
                month=month,
                year=year,
                basic_salary=calc.basic_salary,
                bonus=calc.bonus,
                deductions=calc.deductions,
                allowances=calc.allowances,
                overtime_hours=calc.overtime_hours,
                overtime_rate=calc.overtime_rate,
                total_salary=_clean_total(calc.net_salary),
                notes=notes,
                status=SalaryStatus.DRAFT,
            )
        )
        if record is None:
            # A concurrent writer took the period between the check and the insert.
            raise ConflictError(DUPLICATE_PERIOD_MESSAGE, field="month")

        logger.info(
            "Salary record %s created for employee %s (%02d/%s)",
            record.record_id,
            employee.employee_code,
            month,
            year,
        )
        return to_view(record, employee_summary(employee), self._calculator)

    def update_record(self, account_id: Optional[int], record_id: int, patch: SalaryPatch) -> SalaryRecordView:
        account_id = self._guard.require_account(account_id)
        current = self._guard.assert_owns_record(account_id, record_id)

        def amount(value, field_name: str, stored: Decimal) -> Decimal:
            return _clean_amount(value, field_name) if is_set(value) else stored

        bonus = amount(patch.bonus, "bonus", current.bonus)
        deductions = amount(patch.deductions, "deductions", current.deductions)
        allowances = amount(patch.allowances, "allowances", current.allowances)
        overtime_hours = amount(patch.overtime_hours, "overtime_hours", current.overtime_hours)
        overtime_rate = amount(patch.overtime_rate, "overtime_rate", current.overtime_rate)
        notes = _clean_notes(patch.notes) if is_set(patch.notes) else current.notes

        # Recalculate from the stored snapshot; the employee's current salary is not consulted.
        calc = self._calculator.calculate(
            current.basic_salary,
            bonus=bonus,
            deductions=deductions,
            allowances=allowances,
            overtime_hours=overtime_hours,
            overtime_rate=overtime_rate,
        )
        self._records.update_amounts(
            current.record_id,
            bonus=calc.bonus,
            deductions=calc.deductions,
            allowances=calc.allowances,
            overtime_hours=calc.overtime_hours,
            overtime_rate=calc.overtime_rate,
            total_salary=_clean_total(calc.net_salary),
            notes=notes,
        )
        logger.info("Salary record %s updated by account %s", current.record_id, account_id)

        updated = self._guard.assert_owns_record(account_id, current.record_id)
        return self._view(account_id, updated)

    def approve_record(self, account_id: Optional[int], record_id: int) -> SalaryRecordView:
        """Move a record to APPROVED and stamp ``processed_at``, whatever its current status."""

        account_id = self._guard.require_account(account_id)
        current = self._guard.assert_owns_record(account_id, record_id)

        self._records.set_status(current.record_id, status=SalaryStatus.APPROVED, processed_at=self._clock())
        logger.info("Salary record %s approved (was %s)", current.record_id, current.status.value)

        updated = self._guard.assert_owns_record(account_id, current.record_id)
        return self._view(account_id, updated)

    def delete_record(self, account_id: Optional[int], record_id: int) -> None:
        account_id = self._guard.require_account(account_id)
        current = self._guard.assert_owns_record(account_id, record_id)
        self._records.delete(current.record_id)
        logger.info("Salary record %s deleted by account %s", current.record_id, account_id)

    def list_records(
        self, account_id: Optional[int], filters: Optional[SalaryFilters] = None
    ) -> Sequence[SalaryRecordView]:
        account_id = self._guard.require_account(account_id)
        filters = filters or SalaryFilters()
        filters = SalaryFilters(
            month=clean_month(filters.month) if filters.month else None,
            year=clean_year(filters.year) if filters.year else None,
            department=optional_text(filters.department),
            status=_clean_status(filters.status),
            employee_id=_clean_employee_id(filters.employee_id) if filters.employee_id else None,
        )
        rows = self._records.list_with_employees(account_id=account_id, filters=filters)
        return [to_view(record, employee, self._calculator) for record, employee in rows]

    def dashboard_stats(
        self, account_id: Optional[int], *, month: Optional[int] = None, year: Optional[int] = None
    ) -> PayrollStats:
        """Period totals plus all-time pending approvals and employees with any record."""

        account_id = self._guard.require_account(account_id)
        default_month, default_year = current_period(self._clock().date())
        month = clean_month(month or default_month)
        year = clean_year(year or default_year)

        total_records, total_payroll = self._records.period_totals(account_id=account_id, month=month, year=year)
        return PayrollStats(
            month=month,
            year=year,
            total_records=total_records,
            total_payroll=total_payroll,
            pending_approvals=self._records.count_by_status(account_id=account_id, status=SalaryStatus.DRAFT),
            active_employees=self._records.count_employees_with_records(account_id=account_id),
        )
