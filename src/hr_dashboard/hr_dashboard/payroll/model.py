from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.patch import UNSET, Maybe
from ..core.enums import SalaryStatus


@dataclass(frozen=True)
class SalaryRecord:
    """One employee's payroll for one (month, year).

    ``basic_salary`` is a snapshot taken at creation time, not a live reference.
    """

    record_id: int
    employee_id: int
    month: int
    year: int
    basic_salary: Decimal
    bonus: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    total_salary: Decimal = Decimal("0")
    status: SalaryStatus = SalaryStatus.DRAFT
    notes: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewSalaryRecord:
    employee_id: int
    month: int
    year: int
    basic_salary: Decimal
    total_salary: Decimal
    bonus: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    notes: Optional[str] = None
    status: SalaryStatus = SalaryStatus.DRAFT


@dataclass(frozen=True)
class SalaryInput:
    """Caller-supplied fields for a new record; amounts default to zero."""

    employee_id: int
    month: int
    year: int
    bonus: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    notes: Optional[str] = None


@dataclass(frozen=True)
class SalaryPatch:
    bonus: Maybe[Decimal] = UNSET
    deductions: Maybe[Decimal] = UNSET
    allowances: Maybe[Decimal] = UNSET
    overtime_hours: Maybe[Decimal] = UNSET
    overtime_rate: Maybe[Decimal] = UNSET
    notes: Maybe[Optional[str]] = UNSET


@dataclass(frozen=True)
class SalaryFilters:
    month: Optional[int] = None
    year: Optional[int] = None
    department: Optional[str] = None
    status: Optional[SalaryStatus] = None
    employee_id: Optional[int] = None


@dataclass(frozen=True)
class EmployeeSummary:
    employee_id: int
    employee_code: str
    name: str
    department: Optional[str]
    position: Optional[str]
    basic_salary: Decimal


@dataclass(frozen=True)
class SalaryRecordView:
    """A record joined with its employee, plus totals recomputed from stored values."""

    record: SalaryRecord
    employee: EmployeeSummary
    gross_salary: Decimal = Decimal("0")
    total_deductions: Decimal = Decimal("0")
    net_salary: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        r = self.record
        return {
            "record_id": r.record_id,
            "employee_id": r.employee_id,
            "month": r.month,
            "year": r.year,
            "basic_salary": r.basic_salary,
            "bonus": r.bonus,
            "deductions": r.deductions,
            "allowances": r.allowances,
            "overtime_hours": r.overtime_hours,
            "overtime_rate": r.overtime_rate,
            "total_salary": r.total_salary,
            "status": r.status,
            "notes": r.notes,
            "processed_at": r.processed_at,
            "created_at": r.created_at,
            "updated_at": r.updated_at,
            "employee": self.employee,
            "gross_salary": self.gross_salary,
            "total_deductions": self.total_deductions,
            "net_salary": self.net_salary,
        }


@dataclass(frozen=True)
class PayrollStats:
    month: int
    year: int
    total_records: int
    total_payroll: Decimal
    pending_approvals: int
    active_employees: int


@dataclass(frozen=True)
class MonthlyReport:
    month: int
    year: int
    records: list[SalaryRecordView] = field(default_factory=list)
    new_records_count: int = 0
