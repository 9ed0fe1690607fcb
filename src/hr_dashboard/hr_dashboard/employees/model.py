from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.patch import UNSET, Maybe
from ..core.constants import DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class Employee:
    """Domain entity: a worker owned by exactly one account."""

    employee_id: int
    account_id: int
    employee_code: str
    name: str
    email: Optional[str]
    joining_date: date
    basic_salary: Decimal
    department: Optional[str] = None
    position: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewEmployee:
    employee_code: str
    name: str
    joining_date: date
    basic_salary: Decimal
    email: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class EmployeePatch:
    employee_code: Maybe[str] = UNSET
    name: Maybe[str] = UNSET
    email: Maybe[Optional[str]] = UNSET
    joining_date: Maybe[date] = UNSET
    basic_salary: Maybe[Decimal] = UNSET
    department: Maybe[Optional[str]] = UNSET
    position: Maybe[Optional[str]] = UNSET
    is_active: Maybe[bool] = UNSET


SORTABLE_FIELDS = ("name", "employee_code", "joining_date", "basic_salary", "created_at")


@dataclass(frozen=True)
class EmployeeFilters:
    search: Optional[str] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "created_at"
    sort_order: str = "desc"


@dataclass(frozen=True)
class EmployeePage:
    employees: list[Employee] = field(default_factory=list)
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.limit else 0

    def to_dict(self) -> dict:
        return {
            "employees": self.employees,
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total_count": self.total_count,
                "total_pages": self.total_pages,
                "has_next": self.page < self.total_pages,
                "has_prev": self.page > 1,
            },
        }


@dataclass(frozen=True)
class EmployeeStats:
    total_active: int
    total_inactive: int
    total_employees: int
    average_salary: Decimal
    recent_joins: int
