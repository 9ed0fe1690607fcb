from __future__ import annotations

import logging
from typing import Optional

from ..common.money import round_money
from ..core.enums import SalaryStatus
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .guard import ScopeGuard
from .model import MonthlyReport, NewSalaryRecord, SalaryFilters
from .repository import SalaryRecordRepository
from .service import clean_month, clean_year, to_view

logger = logging.getLogger(__name__)


class MonthlyReportGenerator:
    """Backfill DRAFT records so every active employee has one for the period.

    Existing records are never touched, so calling ``generate`` twice is harmless.
    """

    def __init__(
        self,
        records: SalaryRecordRepository,
        employees: EmployeeRepository,
        *,
        guard: Optional[ScopeGuard] = None,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._records = records
        self._employees = employees
        self._guard = guard or ScopeGuard(employees, records)
        self._calculator = calculator or StandardPayrollCalculator()

    def generate(self, account_id: Optional[int], *, month: int, year: int) -> MonthlyReport:
        account_id = self._guard.require_account(account_id)
        month = clean_month(month)
        year = clean_year(year)

        active = self._employees.list_active(account_id=account_id)
        existing = {r.employee_id for r in self._records.list_for_period(account_id=account_id, month=month, year=year)}

        created = 0
        for employee in active:
            if employee.employee_id in existing:
                continue
            calc = self._calculator.calculate(employee.basic_salary)
            record = self._records.insert_if_absent(
                NewSalaryRecord(
                    employee_id=employee.employee_id,
                    month=month,
                    year=year,
                    basic_salary=calc.basic_salary,
                    total_salary=round_money(calc.net_salary),
                    status=SalaryStatus.DRAFT,
                )
            )
            if record is None:
                # Someone else created it meanwhile; the period is covered either way.
                logger.debug("Skipped employee %s for %02d/%s: record exists", employee.employee_code, month, year)
                continue
            created += 1

        rows = self._records.list_with_employees(account_id=account_id, filters=SalaryFilters(month=month, year=year))
        logger.info("Monthly report %02d/%s generated for account %s: %d new records", month, year, account_id, created)
        return MonthlyReport(
            month=month,
            year=year,
            records=[to_view(record, employee, self._calculator) for record, employee in rows],
            new_records_count=created,
        )
