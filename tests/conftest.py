from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.hr_dashboard.hr_dashboard.accounts.model import Account
from src.hr_dashboard.hr_dashboard.container import wire
from src.hr_dashboard.hr_dashboard.core.enums import OPEN_TASK_STATUSES, ProjectStatus, Role, SalaryStatus
from src.hr_dashboard.hr_dashboard.employees.model import Employee, EmployeeStats, NewEmployee
from src.hr_dashboard.hr_dashboard.payroll.model import EmployeeSummary, SalaryRecord
from src.hr_dashboard.hr_dashboard.projects.model import Project, ProjectStats, Task, TaskAssignee, TaskView

FIXED_NOW = datetime(2024, 6, 15, 9, 30, 0)

# (code, name, basic_salary, department)
EIGHT_EMPLOYEES = [
    ("EMP001", "John Smith", 75000, "Engineering"),
    ("EMP002", "Sarah Johnson", 65000, "Design"),
    ("EMP003", "Michael Brown", 80000, "Engineering"),
    ("EMP004", "Emily Davis", 55000, "Marketing"),
    ("EMP005", "David Wilson", 90000, "Engineering"),
    ("EMP006", "Lisa Anderson", 60000, "HR"),
    ("EMP007", "Robert Taylor", 70000, "Sales"),
    ("EMP008", "Jennifer Martinez", 58000, "Design"),
]


class InMemoryAccounts:
    def __init__(self):
        self._by_id: dict[int, Account] = {}
        self._id = 0

    def get_by_id(self, account_id: int) -> Optional[Account]:
        return self._by_id.get(account_id)

    def get_by_email(self, email: str) -> Optional[Account]:
        return next((a for a in self._by_id.values() if a.email == email), None)

    def create_account(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        if self.get_by_email(email):
            return 0
        self._id += 1
        self._by_id[self._id] = Account(
            account_id=self._id, name=name, email=email, password_hash=password_hash, role=role
        )
        return self._id


class InMemoryEmployees:
    def __init__(self):
        self.rows: dict[int, Employee] = {}
        self._id = 0

    def add(
        self,
        account_id: int,
        code: str,
        name: str,
        basic_salary,
        *,
        department: Optional[str] = None,
        email: Optional[str] = None,
        joining_date: date = date(2023, 1, 15),
        is_active: bool = True,
    ) -> Employee:
        employee_id = self.create(
            account_id=account_id,
            data=NewEmployee(
                employee_code=code,
                name=name,
                email=email,
                joining_date=joining_date,
                basic_salary=Decimal(str(basic_salary)),
                department=department,
                is_active=is_active,
            ),
        )
        return self.rows[employee_id]

    def find_owned(self, *, account_id: int, employee_id: int) -> Optional[Employee]:
        e = self.rows.get(employee_id)
        return e if e and e.account_id == account_id else None

    def find_by_code(self, *, account_id: int, employee_code: str) -> Optional[Employee]:
        return next(
            (e for e in self.rows.values() if e.account_id == account_id and e.employee_code == employee_code), None
        )

    def find_by_email(self, *, account_id: int, email: str) -> Optional[Employee]:
        return next((e for e in self.rows.values() if e.account_id == account_id and e.email == email), None)

    def list_active(self, *, account_id: int):
        items = [e for e in self.rows.values() if e.account_id == account_id and e.is_active]
        return sorted(items, key=lambda e: e.name)

    def search(self, *, account_id: int, filters):
        items = [e for e in self.rows.values() if e.account_id == account_id]
        if filters.is_active is not None:
            items = [e for e in items if e.is_active == filters.is_active]
        if filters.department:
            items = [e for e in items if e.department == filters.department]
        if filters.search:
            term = filters.search.lower()
            items = [
                e
                for e in items
                if any(term in (v or "").lower() for v in (e.name, e.employee_code, e.email, e.position))
            ]
        items.sort(key=lambda e: (getattr(e, filters.sort_by) or 0, e.employee_id), reverse=filters.sort_order == "desc")
        start = (filters.page - 1) * filters.limit
        return items[start : start + filters.limit], len(items)

    def create(self, *, account_id: int, data: NewEmployee) -> int:
        self._id += 1
        self.rows[self._id] = Employee(
            employee_id=self._id,
            account_id=account_id,
            employee_code=data.employee_code,
            name=data.name,
            email=data.email,
            joining_date=data.joining_date,
            basic_salary=data.basic_salary,
            department=data.department,
            position=data.position,
            is_active=data.is_active,
            created_at=datetime(2024, 1, 1, 0, 0, self._id % 60),
        )
        return self._id

    def update(self, *, employee_id: int, **fields) -> bool:
        self.rows[employee_id] = replace(self.rows[employee_id], **fields)
        return True

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        self.rows[employee_id] = replace(self.rows[employee_id], is_active=is_active)
        return True

    def stats(self, *, account_id: int, joined_since: date) -> EmployeeStats:
        items = [e for e in self.rows.values() if e.account_id == account_id]
        active = [e for e in items if e.is_active]
        average = sum((e.basic_salary for e in active), Decimal("0")) / len(active) if active else Decimal("0")
        return EmployeeStats(
            total_active=len(active),
            total_inactive=len(items) - len(active),
            total_employees=len(items),
            average_salary=average,
            recent_joins=sum(1 for e in items if e.joining_date >= joined_since),
        )


class InMemorySalaryRecords:
    """Mirrors the UNIQUE (employee_id, month, year) constraint of the real table."""

    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self.rows: dict[int, SalaryRecord] = {}
        self._id = 0

    def _owned(self, account_id: int):
        return [r for r in self.rows.values() if self._employees.find_owned(account_id=account_id, employee_id=r.employee_id)]

    def find_owned(self, *, account_id: int, record_id: int) -> Optional[SalaryRecord]:
        r = self.rows.get(record_id)
        if r and self._employees.find_owned(account_id=account_id, employee_id=r.employee_id):
            return r
        return None

    def find_by_period(self, *, employee_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        return next(
            (r for r in self.rows.values() if (r.employee_id, r.month, r.year) == (employee_id, month, year)), None
        )

    def list_for_period(self, *, account_id: int, month: int, year: int):
        return [r for r in self._owned(account_id) if (r.month, r.year) == (month, year)]

    def insert_if_absent(self, data) -> Optional[SalaryRecord]:
        key = (data.employee_id, data.month, data.year)
        if any((r.employee_id, r.month, r.year) == key for r in self.rows.values()):
            return None
        self._id += 1
        self.rows[self._id] = SalaryRecord(
            record_id=self._id,
            employee_id=data.employee_id,
            month=data.month,
            year=data.year,
            basic_salary=data.basic_salary,
            bonus=data.bonus,
            deductions=data.deductions,
            allowances=data.allowances,
            overtime_hours=data.overtime_hours,
            overtime_rate=data.overtime_rate,
            total_salary=data.total_salary,
            status=data.status,
            notes=data.notes,
        )
        return self.rows[self._id]

    def update_amounts(self, record_id: int, **fields) -> bool:
        self.rows[record_id] = replace(self.rows[record_id], **fields)
        return True

    def set_status(self, record_id: int, *, status: SalaryStatus, processed_at) -> bool:
        self.rows[record_id] = replace(self.rows[record_id], status=status, processed_at=processed_at)
        return True

    def delete(self, record_id: int) -> bool:
        return self.rows.pop(record_id, None) is not None

    def list_with_employees(self, *, account_id: int, filters):
        out = []
        for r in self._owned(account_id):
            e = self._employees.rows[r.employee_id]
            if filters.month and r.month != filters.month:
                continue
            if filters.year and r.year != filters.year:
                continue
            if filters.employee_id and r.employee_id != filters.employee_id:
                continue
            if filters.status and r.status != filters.status:
                continue
            if filters.department and filters.department.lower() not in (e.department or "").lower():
                continue
            summary = EmployeeSummary(
                employee_id=e.employee_id,
                employee_code=e.employee_code,
                name=e.name,
                department=e.department,
                position=e.position,
                basic_salary=e.basic_salary,
            )
            out.append((r, summary))
        out.sort(key=lambda pair: pair[1].name)
        out.sort(key=lambda pair: (pair[0].year, pair[0].month), reverse=True)
        return out

    def period_totals(self, *, account_id: int, month: int, year: int):
        items = self.list_for_period(account_id=account_id, month=month, year=year)
        return len(items), sum((r.total_salary for r in items), Decimal("0"))

    def count_by_status(self, *, account_id: int, status: SalaryStatus) -> int:
        return sum(1 for r in self._owned(account_id) if r.status == status)

    def count_employees_with_records(self, *, account_id: int) -> int:
        return len({r.employee_id for r in self._owned(account_id)})


class InMemoryProjects:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self.projects: dict[int, Project] = {}
        self.tasks: dict[int, Task] = {}
        self._touched: dict[int, int] = {}
        self._project_id = 0
        self._task_id = 0
        self._tick = 0

    def _touch(self, project_id: int) -> None:
        self._tick += 1
        self._touched[project_id] = self._tick

    def find_owned_project(self, *, account_id: int, project_id: int) -> Optional[Project]:
        p = self.projects.get(project_id)
        return p if p and p.account_id == account_id else None

    def list_projects(self, *, account_id: int, filters):
        items = [p for p in self.projects.values() if p.account_id == account_id]
        if filters.search:
            term = filters.search.lower()
            items = [p for p in items if term in p.title.lower() or term in (p.description or "").lower()]
        if filters.status:
            items = [p for p in items if p.status == filters.status]
        if filters.start_date_from:
            items = [p for p in items if p.start_date and p.start_date >= filters.start_date_from]
        if filters.start_date_to:
            items = [p for p in items if p.start_date and p.start_date <= filters.start_date_to]
        return sorted(items, key=lambda p: self._touched[p.project_id], reverse=True)

    def create_project(self, *, account_id: int, data) -> int:
        self._project_id += 1
        self.projects[self._project_id] = Project(
            project_id=self._project_id,
            account_id=account_id,
            title=data.title,
            description=data.description,
            status=data.status,
            start_date=data.start_date,
            end_date=data.end_date,
            budget=data.budget,
        )
        self._touch(self._project_id)
        return self._project_id

    def update_project(self, project: Project) -> bool:
        self.projects[project.project_id] = project
        self._touch(project.project_id)
        return True

    def delete_project(self, project_id: int) -> bool:
        for task_id in [t.task_id for t in self.tasks.values() if t.project_id == project_id]:
            del self.tasks[task_id]
        return self.projects.pop(project_id, None) is not None

    def project_stats(self, *, account_id: int) -> ProjectStats:
        projects = [p for p in self.projects.values() if p.account_id == account_id]
        ids = {p.project_id for p in projects}
        tasks = [t for t in self.tasks.values() if t.project_id in ids]
        return ProjectStats(
            total_projects=len(projects),
            active_projects=sum(1 for p in projects if p.status == ProjectStatus.IN_PROGRESS),
            completed_projects=sum(1 for p in projects if p.status == ProjectStatus.COMPLETED),
            total_tasks=len(tasks),
            pending_tasks=sum(1 for t in tasks if t.status in OPEN_TASK_STATUSES),
        )

    def find_owned_task(self, *, account_id: int, task_id: int) -> Optional[Task]:
        t = self.tasks.get(task_id)
        if t and self.find_owned_project(account_id=account_id, project_id=t.project_id):
            return t
        return None

    def list_tasks(self, *, account_id: int, filters):
        out = []
        for t in sorted(self.tasks.values(), key=lambda t: t.task_id, reverse=True):
            project = self.find_owned_project(account_id=account_id, project_id=t.project_id)
            if not project:
                continue
            if filters.project_id and t.project_id != filters.project_id:
                continue
            if filters.status and t.status != filters.status:
                continue
            if filters.priority and t.priority != filters.priority:
                continue
            if filters.assignee_id and t.assignee_id != filters.assignee_id:
                continue
            if filters.search and filters.search.lower() not in t.title.lower():
                continue
            assignee = None
            if t.assignee_id:
                e = self._employees.rows[t.assignee_id]
                assignee = TaskAssignee(employee_id=e.employee_id, employee_code=e.employee_code, name=e.name)
            out.append(TaskView(task=t, project_title=project.title, assignee=assignee))
        return out

    def create_task(self, data) -> int:
        self._task_id += 1
        self.tasks[self._task_id] = Task(
            task_id=self._task_id,
            project_id=data.project_id,
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            estimated_hours=data.estimated_hours,
            actual_hours=data.actual_hours,
            due_date=data.due_date,
            assignee_id=data.assignee_id,
        )
        return self._task_id

    def update_task(self, task: Task) -> bool:
        self.tasks[task.task_id] = task
        return True

    def delete_task(self, task_id: int) -> bool:
        return self.tasks.pop(task_id, None) is not None


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def accounts_repo() -> InMemoryAccounts:
    return InMemoryAccounts()


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def salary_repo(employees_repo) -> InMemorySalaryRecords:
    return InMemorySalaryRecords(employees_repo)


@pytest.fixture
def projects_repo(employees_repo) -> InMemoryProjects:
    return InMemoryProjects(employees_repo)


@pytest.fixture
def container(accounts_repo, employees_repo, salary_repo, projects_repo, fixed_now):
    return wire(
        accounts_repo=accounts_repo,
        employees_repo=employees_repo,
        salary_repo=salary_repo,
        projects_repo=projects_repo,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def staff(employees_repo) -> list[Employee]:
    """Eight active employees owned by account 1."""

    return [employees_repo.add(1, code, name, salary, department=dept) for code, name, salary, dept in EIGHT_EMPLOYEES]
