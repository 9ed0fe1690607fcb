from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.patch import is_set, pick
from ..common.validators import (
    optional_text,
    require_amount,
    require_email,
    require_int_range,
    require_max_length,
    require_min_length,
    require_non_empty,
    require_pattern,
)
from ..core.constants import EMPLOYEE_CODE_MAX_LENGTH, MAX_BASIC_SALARY, MAX_PAGE_SIZE, RECENT_JOIN_DAYS
from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from .model import (
    SORTABLE_FIELDS,
    Employee,
    EmployeeFilters,
    EmployeePage,
    EmployeePatch,
    EmployeeStats,
    NewEmployee,
)
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_NAME_PATTERN = r"[a-zA-Z\s'-]+"
_CODE_PATTERN = r"[A-Z0-9]+"


def _clean_code(value: str) -> str:
    code = require_non_empty(value, "employee_code")
    require_max_length(code, "employee_code", EMPLOYEE_CODE_MAX_LENGTH)
    return require_pattern(
        code, "employee_code", _CODE_PATTERN, "Employee ID must contain only uppercase letters and numbers"
    )


def _clean_name(value: str) -> str:
    name = require_non_empty(value, "name")
    require_min_length(name, "name", 2)
    require_max_length(name, "name", 100)
    return require_pattern(
        name, "name", _NAME_PATTERN, "Name can only contain letters, spaces, hyphens, and apostrophes"
    )


def _clean_email(value: Optional[str]) -> Optional[str]:
    v = optional_text(value)
    return require_email(v) if v else None


def _clean_label(value: Optional[str], field_name: str) -> Optional[str]:
    return require_max_length(optional_text(value), field_name, 50)


def _clean_joining_date(value) -> date:
    if not isinstance(value, date):
        raise ValidationError("Please enter a valid date", errors={"joining_date": "Joining date is required"})
    return value


def _clean_salary(value) -> Decimal:
    if value is None or value == "":
        raise ValidationError("Basic salary is required", errors={"basic_salary": "Basic salary is required"})
    return require_amount(value, "basic_salary", maximum=Decimal(MAX_BASIC_SALARY))


class EmployeeService:
    """Use cases: manage the employees of one account (soft delete, restore, stats)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def _require_account(account_id: Optional[int]) -> int:
        if not account_id:
            raise UnauthorizedError("Authentication required")
        return int(account_id)

    def _get_owned(self, account_id: int, employee_id: int) -> Employee:
        employee = self._employees.find_owned(account_id=account_id, employee_id=int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _assert_unique(self, account_id: int, *, code: Optional[str], email: Optional[str], exclude_id: int = 0):
        if code:
            dup = self._employees.find_by_code(account_id=account_id, employee_code=code)
            if dup and dup.employee_id != exclude_id:
                raise ConflictError("Employee ID already exists", field="employee_code")
        if email:
            dup = self._employees.find_by_email(account_id=account_id, email=email)
            if dup and dup.employee_id != exclude_id:
                raise ConflictError("Email already exists", field="email")

    def create_employee(self, account_id: Optional[int], data: NewEmployee) -> Employee:
        account_id = self._require_account(account_id)
        clean = NewEmployee(
            employee_code=_clean_code(data.employee_code),
            name=_clean_name(data.name),
            email=_clean_email(data.email),
            joining_date=_clean_joining_date(data.joining_date),
            basic_salary=_clean_salary(data.basic_salary),
            department=_clean_label(data.department, "department"),
            position=_clean_label(data.position, "position"),
            is_active=bool(data.is_active),
        )
        self._assert_unique(account_id, code=clean.employee_code, email=clean.email)

        employee_id = self._employees.create(account_id=account_id, data=clean)
        return self._get_owned(account_id, employee_id)

    def get_employee(self, account_id: Optional[int], employee_id: int) -> Employee:
        return self._get_owned(self._require_account(account_id), employee_id)

    def list_employees(self, account_id: Optional[int], filters: Optional[EmployeeFilters] = None) -> EmployeePage:
        account_id = self._require_account(account_id)
        filters = filters or EmployeeFilters()

        page = require_int_range(filters.page, "page", 1, 1_000_000)
        limit = require_int_range(filters.limit, "limit", 1, MAX_PAGE_SIZE)
        if filters.sort_by not in SORTABLE_FIELDS:
            raise ValidationError("Invalid sort field", errors={"sort_by": "Invalid sort field"})
        if filters.sort_order not in ("asc", "desc"):
            raise ValidationError("Invalid sort order", errors={"sort_order": "Invalid sort order"})

        filters = EmployeeFilters(
            search=optional_text(filters.search),
            department=optional_text(filters.department),
            is_active=filters.is_active,
            page=page,
            limit=limit,
            sort_by=filters.sort_by,
            sort_order=filters.sort_order,
        )
        employees, total = self._employees.search(account_id=account_id, filters=filters)
        return EmployeePage(employees=list(employees), page=page, limit=limit, total_count=int(total))

    def update_employee(self, account_id: Optional[int], employee_id: int, patch: EmployeePatch) -> Employee:
        account_id = self._require_account(account_id)
        current = self._get_owned(account_id, employee_id)

        code = _clean_code(patch.employee_code) if is_set(patch.employee_code) else current.employee_code
        email = _clean_email(patch.email) if is_set(patch.email) else current.email
        self._assert_unique(
            account_id,
            code=code if is_set(patch.employee_code) else None,
            email=email if is_set(patch.email) else None,
            exclude_id=current.employee_id,
        )

        self._employees.update(
            employee_id=current.employee_id,
            employee_code=code,
            name=_clean_name(patch.name) if is_set(patch.name) else current.name,
            email=email,
            joining_date=(
                _clean_joining_date(patch.joining_date) if is_set(patch.joining_date) else current.joining_date
            ),
            basic_salary=_clean_salary(patch.basic_salary) if is_set(patch.basic_salary) else current.basic_salary,
            department=(
                _clean_label(patch.department, "department") if is_set(patch.department) else current.department
            ),
            position=_clean_label(patch.position, "position") if is_set(patch.position) else current.position,
            is_active=bool(pick(patch.is_active, current.is_active)),
        )
        return self._get_owned(account_id, current.employee_id)

    def delete_employee(self, account_id: Optional[int], employee_id: int) -> None:
        """Soft delete: salary history stays attached to the inactive employee."""

        account_id = self._require_account(account_id)
        employee = self._get_owned(account_id, employee_id)
        self._employees.set_active(employee.employee_id, is_active=False)
        logger.info("Employee %s deactivated by account %s", employee.employee_code, account_id)

    def restore_employee(self, account_id: Optional[int], employee_id: int) -> None:
        account_id = self._require_account(account_id)
        employee = self._get_owned(account_id, employee_id)
        self._employees.set_active(employee.employee_id, is_active=True)
        logger.info("Employee %s restored by account %s", employee.employee_code, account_id)

    def employee_stats(self, account_id: Optional[int], *, today: Optional[date] = None) -> EmployeeStats:
        account_id = self._require_account(account_id)
        today = today or now_local().date()
        return self._employees.stats(account_id=account_id, joined_since=today - timedelta(days=RECENT_JOIN_DAYS))
