from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, like_pattern
from .model import SORTABLE_FIELDS, Employee, EmployeeFilters, EmployeeStats, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, account_id, employee_code, name, email, joining_date,
    basic_salary, department, position, is_active, created_at
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        account_id=int(row["account_id"]),
        employee_code=row["employee_code"],
        name=row["name"],
        email=row.get("email"),
        joining_date=row["joining_date"],
        basic_salary=Decimal(row["basic_salary"]),
        department=row.get("department"),
        position=row.get("position"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _find_one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def find_owned(self, *, account_id: int, employee_id: int) -> Optional[Employee]:
        return self._find_one("employee_id=%s AND account_id=%s", (int(employee_id), int(account_id)))

    def find_by_code(self, *, account_id: int, employee_code: str) -> Optional[Employee]:
        return self._find_one("account_id=%s AND employee_code=%s", (int(account_id), employee_code))

    def find_by_email(self, *, account_id: int, email: str) -> Optional[Employee]:
        return self._find_one("account_id=%s AND email=%s", (int(account_id), email))

    def list_active(self, *, account_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE account_id=%s AND is_active=1 ORDER BY name",
                (int(account_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def search(self, *, account_id: int, filters: EmployeeFilters) -> tuple[Sequence[Employee], int]:
        clauses = ["account_id=%s"]
        params: list[object] = [int(account_id)]

        if filters.is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if filters.is_active else 0)
        if filters.department:
            clauses.append("department=%s")
            params.append(filters.department)
        if filters.search:
            pattern = like_pattern(filters.search)
            clauses.append("(name LIKE %s OR employee_code LIKE %s OR email LIKE %s OR position LIKE %s)")
            params.extend([pattern] * 4)

        where = build_where(clauses)
        # sort_by is whitelisted; never interpolate raw input.
        sort_by = filters.sort_by if filters.sort_by in SORTABLE_FIELDS else "created_at"
        sort_order = "ASC" if filters.sort_order == "asc" else "DESC"
        offset = (filters.page - 1) * filters.limit

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM employees WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE {where}
                ORDER BY {sort_by} {sort_order}, employee_id {sort_order}
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(filters.limit), int(offset)]),
            )
            return [_to_employee(r) for r in fetchall(cur)], total

    def create(self, *, account_id: int, data: NewEmployee) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(account_id, employee_code, name, email, joining_date,
                                      basic_salary, department, position, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(account_id),
                    data.employee_code,
                    data.name,
                    data.email,
                    data.joining_date,
                    data.basic_salary,
                    data.department,
                    data.position,
                    1 if data.is_active else 0,
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET employee_code=%s, name=%s, email=%s, joining_date=%s, basic_salary=%s,
                    department=%s, position=%s, is_active=%s
                WHERE employee_id=%s
                """,
                (
                    employee_code,
                    name,
                    email,
                    joining_date,
                    basic_salary,
                    department,
                    position,
                    1 if is_active else 0,
                    int(employee_id),
                ),
            )
            # rowcount is 0 when nothing changed; existence was checked by the caller.
            return cur.rowcount >= 0

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s WHERE employee_id=%s",
                (1 if is_active else 0, int(employee_id)),
            )
            return cur.rowcount >= 0

    def stats(self, *, account_id: int, joined_since: date) -> EmployeeStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(is_active = 1), 0) AS active,
                    COALESCE(AVG(CASE WHEN is_active = 1 THEN basic_salary END), 0) AS avg_salary,
                    COALESCE(SUM(joining_date >= %s), 0) AS recent
                FROM employees
                WHERE account_id=%s
                """,
                (joined_since, int(account_id)),
            )
            r = fetchone(cur) or {}
            total = int(r.get("total") or 0)
            active = int(r.get("active") or 0)
            return EmployeeStats(
                total_active=active,
                total_inactive=total - active,
                total_employees=total,
                average_salary=Decimal(r.get("avg_salary") or 0),
                recent_joins=int(r.get("recent") or 0),
            )
