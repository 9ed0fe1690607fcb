from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import SalaryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, is_duplicate_key, like_pattern
from .model import EmployeeSummary, NewSalaryRecord, SalaryFilters, SalaryRecord
from .repository import SalaryRecordRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    s.record_id, s.employee_id, s.month, s.year, s.basic_salary, s.bonus, s.deductions,
    s.allowances, s.overtime_hours, s.overtime_rate, s.total_salary, s.status, s.notes,
    s.processed_at, s.created_at, s.updated_at
"""

_EMPLOYEE_COLUMNS = """
    e.employee_code, e.name AS employee_name, e.department, e.position,
    e.basic_salary AS employee_basic_salary
"""


def _dec(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def _to_record(row: dict) -> SalaryRecord:
    return SalaryRecord(
        record_id=int(row["record_id"]),
        employee_id=int(row["employee_id"]),
        month=int(row["month"]),
        year=int(row["year"]),
        basic_salary=_dec(row["basic_salary"]),
        bonus=_dec(row.get("bonus")),
        deductions=_dec(row.get("deductions")),
        allowances=_dec(row.get("allowances")),
        overtime_hours=_dec(row.get("overtime_hours")),
        overtime_rate=_dec(row.get("overtime_rate")),
        total_salary=_dec(row.get("total_salary")),
        status=SalaryStatus(row["status"]),
        notes=row.get("notes"),
        processed_at=row.get("processed_at"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _to_summary(row: dict) -> EmployeeSummary:
    return EmployeeSummary(
        employee_id=int(row["employee_id"]),
        employee_code=row["employee_code"],
        name=row["employee_name"],
        department=row.get("department"),
        position=row.get("position"),
        basic_salary=_dec(row.get("employee_basic_salary")),
    )


class MySQLSalaryRecordRepository(SalaryRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get(self, record_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_records s WHERE s.record_id=%s", (int(record_id),))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def find_owned(self, *, account_id: int, record_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_records s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE s.record_id=%s AND e.account_id=%s
                """,
                (int(record_id), int(account_id)),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def find_by_period(self, *, employee_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_records s
                WHERE s.employee_id=%s AND s.month=%s AND s.year=%s
                """,
                (int(employee_id), int(month), int(year)),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def list_for_period(self, *, account_id: int, month: int, year: int) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_records s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE e.account_id=%s AND s.month=%s AND s.year=%s
                """,
                (int(account_id), int(month), int(year)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def insert_if_absent(self, data: NewSalaryRecord) -> Optional[SalaryRecord]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO salary_records(employee_id, month, year, basic_salary, bonus, deductions,
                                               allowances, overtime_hours, overtime_rate, total_salary,
                                               status, notes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(data.employee_id),
                        int(data.month),
                        int(data.year),
                        data.basic_salary,
                        data.bonus,
                        data.deductions,
                        data.allowances,
                        data.overtime_hours,
                        data.overtime_rate,
                        data.total_salary,
                        data.status.value,
                        data.notes,
                    ),
                )
                record_id = int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                logger.debug(
                    "Salary record for employee %s %02d/%s already exists", data.employee_id, data.month, data.year
                )
                return None
            raise
        return self._get(record_id)

    def update_amounts(
        self,
        record_id: int,
        *,
        bonus: Decimal,
        deductions: Decimal,
        allowances: Decimal,
        overtime_hours: Decimal,
        overtime_rate: Decimal,
        total_salary: Decimal,
        notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_records
                SET bonus=%s, deductions=%s, allowances=%s, overtime_hours=%s, overtime_rate=%s,
                    total_salary=%s, notes=%s
                WHERE record_id=%s
                """,
                (bonus, deductions, allowances, overtime_hours, overtime_rate, total_salary, notes, int(record_id)),
            )
            return cur.rowcount >= 0

    def set_status(self, record_id: int, *, status: SalaryStatus, processed_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_records SET status=%s, processed_at=%s WHERE record_id=%s",
                (status.value, processed_at, int(record_id)),
            )
            return cur.rowcount >= 0

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0

    def list_with_employees(
        self, *, account_id: int, filters: SalaryFilters
    ) -> Sequence[tuple[SalaryRecord, EmployeeSummary]]:
        clauses = ["e.account_id=%s"]
        params: list[object] = [int(account_id)]

        if filters.month:
            clauses.append("s.month=%s")
            params.append(int(filters.month))
        if filters.year:
            clauses.append("s.year=%s")
            params.append(int(filters.year))
        if filters.employee_id:
            clauses.append("s.employee_id=%s")
            params.append(int(filters.employee_id))
        if filters.status:
            clauses.append("s.status=%s")
            params.append(filters.status.value)
        if filters.department:
            clauses.append("e.department LIKE %s")
            params.append(like_pattern(filters.department))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, {_EMPLOYEE_COLUMNS}
                FROM salary_records s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE {build_where(clauses)}
                ORDER BY s.year DESC, s.month DESC, e.name ASC
                """,
                tuple(params),
            )
            return [(_to_record(r), _to_summary(r)) for r in fetchall(cur)]

    def period_totals(self, *, account_id: int, month: int, year: int) -> tuple[int, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n, COALESCE(SUM(s.total_salary), 0) AS total
                FROM salary_records s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE e.account_id=%s AND s.month=%s AND s.year=%s
                """,
                (int(account_id), int(month), int(year)),
            )
            r = fetchone(cur) or {}
            return int(r.get("n") or 0), _dec(r.get("total"))

    def count_by_status(self, *, account_id: int, status: SalaryStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM salary_records s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE e.account_id=%s AND s.status=%s
                """,
                (int(account_id), status.value),
            )
            return int((fetchone(cur) or {}).get("n") or 0)

    def count_employees_with_records(self, *, account_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT s.employee_id) AS n
                FROM salary_records s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE e.account_id=%s
                """,
                (int(account_id),),
            )
            return int((fetchone(cur) or {}).get("n") or 0)
