from __future__ import annotations

from typing import Optional

from ..core.result import ActionResult, run_action
from .model import SalaryFilters, SalaryInput, SalaryPatch
from .report import MonthlyReportGenerator
from .service import PayrollService


class PayrollActions:
    """Payroll operations as seen by the web layer: every call returns an ActionResult."""

    def __init__(self, service: PayrollService, generator: MonthlyReportGenerator):
        self._service = service
        self._generator = generator

    def create_salary_record(self, account_id: Optional[int], data: SalaryInput) -> ActionResult:
        return run_action(
            lambda: self._service.create_record(account_id, data),
            failure_message="Failed to create salary record",
        )

    def update_salary_record(self, account_id: Optional[int], record_id: int, patch: SalaryPatch) -> ActionResult:
        return run_action(
            lambda: self._service.update_record(account_id, record_id, patch),
            failure_message="Failed to update salary record",
        )

    def delete_salary_record(self, account_id: Optional[int], record_id: int) -> ActionResult:
        return run_action(
            lambda: self._service.delete_record(account_id, record_id),
            failure_message="Failed to delete salary record",
        )

    def approve_salary_record(self, account_id: Optional[int], record_id: int) -> ActionResult:
        return run_action(
            lambda: self._service.approve_record(account_id, record_id),
            failure_message="Failed to approve salary record",
        )

    def list_salary_records(self, account_id: Optional[int], filters: Optional[SalaryFilters] = None) -> ActionResult:
        return run_action(
            lambda: self._service.list_records(account_id, filters),
            failure_message="Failed to fetch salary records",
        )

    def generate_monthly_report(self, account_id: Optional[int], *, month: int, year: int) -> ActionResult:
        return run_action(
            lambda: self._generator.generate(account_id, month=month, year=year),
            failure_message="Failed to generate salary report",
        )

    def get_dashboard_stats(
        self, account_id: Optional[int], *, month: Optional[int] = None, year: Optional[int] = None
    ) -> ActionResult:
        return run_action(
            lambda: self._service.dashboard_stats(account_id, month=month, year=year),
            failure_message="Failed to fetch dashboard statistics",
        )
