from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeFilters, EmployeeStats, NewEmployee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Every read takes the owning ``account_id``: a row owned by another account is
    reported exactly like a missing one.
    """

    def find_owned(self, *, account_id: int, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_code(self, *, account_id: int, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_email(self, *, account_id: int, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, *, account_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def search(self, *, account_id: int, filters: EmployeeFilters) -> tuple[Sequence[Employee], int]:
        """Return one page of matches plus the total match count."""

        raise NotImplementedError

    def create(self, *, account_id: int, data: NewEmployee) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        employee_id: int,
        employee_code: str,
        name: str,
        email: Optional[str],
        joining_date: date,
        basic_salary: Decimal,
        department: Optional[str],
        position: Optional[str],
        is_active: bool,
    ) -> bool:
        raise NotImplementedError

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def stats(self, *, account_id: int, joined_since: date) -> EmployeeStats:
        raise NotImplementedError
