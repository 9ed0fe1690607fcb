from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .accounts.mysql_account_repository import MySQLAccountRepository
from .accounts.repository import AccountRepository
from .accounts.service import AuthService
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .payroll.actions import PayrollActions
from .payroll.guard import ScopeGuard
from .payroll.mysql_salary_repository import MySQLSalaryRecordRepository
from .payroll.report import MonthlyReportGenerator
from .payroll.repository import SalaryRecordRepository
from .payroll.service import PayrollService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .projects.service import ProjectService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    accounts_repo: AccountRepository
    employees_repo: EmployeeRepository
    salary_repo: SalaryRecordRepository
    projects_repo: ProjectRepository

    auth_service: AuthService
    employee_service: EmployeeService
    payroll_service: PayrollService
    report_generator: MonthlyReportGenerator
    payroll_actions: PayrollActions
    project_service: ProjectService


def wire(
    *,
    accounts_repo: AccountRepository,
    employees_repo: EmployeeRepository,
    salary_repo: SalaryRecordRepository,
    projects_repo: ProjectRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""

    guard = ScopeGuard(employees_repo, salary_repo)
    payroll_service = PayrollService(salary_repo, employees_repo, guard=guard, clock=clock)
    report_generator = MonthlyReportGenerator(salary_repo, employees_repo, guard=guard)

    return Container(
        conn=conn,
        accounts_repo=accounts_repo,
        employees_repo=employees_repo,
        salary_repo=salary_repo,
        projects_repo=projects_repo,
        auth_service=AuthService(accounts_repo),
        employee_service=EmployeeService(employees_repo),
        payroll_service=payroll_service,
        report_generator=report_generator,
        payroll_actions=PayrollActions(payroll_service, report_generator),
        project_service=ProjectService(projects_repo, employees_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        conn=conn,
        accounts_repo=MySQLAccountRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        salary_repo=MySQLSalaryRecordRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
    )
