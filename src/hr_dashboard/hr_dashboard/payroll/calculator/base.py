from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SalaryCalculation:
    """Inputs of one payroll computation plus the derived totals."""

    basic_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    allowances: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_pay: Decimal
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        basic_salary,
        *,
        bonus=0,
        deductions=0,
        allowances=0,
        overtime_hours=0,
        overtime_rate=0,
    ) -> SalaryCalculation:
        raise NotImplementedError
