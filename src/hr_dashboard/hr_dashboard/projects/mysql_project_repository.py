from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import OPEN_TASK_STATUSES, ProjectStatus, TaskPriority, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, like_pattern
from .model import (
    NewProject,
    NewTask,
    Project,
    ProjectFilters,
    ProjectStats,
    Task,
    TaskAssignee,
    TaskFilters,
    TaskView,
)
from .repository import ProjectRepository

_PROJECT_COLUMNS = """
    p.project_id, p.account_id, p.title, p.description, p.status, p.start_date, p.end_date,
    p.budget, p.created_at, p.updated_at
"""

_TASK_COLUMNS = """
    t.task_id, t.project_id, t.title, t.description, t.status, t.priority, t.estimated_hours,
    t.actual_hours, t.due_date, t.assignee_id, t.created_at, t.updated_at
"""


def _opt_dec(value) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def _to_project(row: dict) -> Project:
    return Project(
        project_id=int(row["project_id"]),
        account_id=int(row["account_id"]),
        title=row["title"],
        description=row.get("description"),
        status=ProjectStatus(row["status"]),
        start_date=row.get("start_date"),
        end_date=row.get("end_date"),
        budget=_opt_dec(row.get("budget")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _to_task(row: dict) -> Task:
    return Task(
        task_id=int(row["task_id"]),
        project_id=int(row["project_id"]),
        title=row["title"],
        description=row.get("description"),
        status=TaskStatus(row["status"]),
        priority=TaskPriority(row["priority"]),
        estimated_hours=_opt_dec(row.get("estimated_hours")),
        actual_hours=_opt_dec(row.get("actual_hours")),
        due_date=row.get("due_date"),
        assignee_id=int(row["assignee_id"]) if row.get("assignee_id") else None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _to_task_view(row: dict) -> TaskView:
    task = _to_task(row)
    assignee = None
    if task.assignee_id:
        assignee = TaskAssignee(
            employee_id=task.assignee_id,
            employee_code=row["assignee_code"],
            name=row["assignee_name"],
        )
    return TaskView(task=task, project_title=row["project_title"], assignee=assignee)


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_owned_project(self, *, account_id: int, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PROJECT_COLUMNS} FROM projects p WHERE p.project_id=%s AND p.account_id=%s",
                (int(project_id), int(account_id)),
            )
            row = fetchone(cur)
            return _to_project(row) if row else None

    def list_projects(self, *, account_id: int, filters: ProjectFilters) -> Sequence[Project]:
        clauses = ["p.account_id=%s"]
        params: list[object] = [int(account_id)]

        if filters.search:
            pattern = like_pattern(filters.search)
            clauses.append("(p.title LIKE %s OR p.description LIKE %s)")
            params.extend([pattern, pattern])
        if filters.status:
            clauses.append("p.status=%s")
            params.append(filters.status.value)
        if filters.start_date_from:
            clauses.append("p.start_date >= %s")
            params.append(filters.start_date_from)
        if filters.start_date_to:
            clauses.append("p.start_date <= %s")
            params.append(filters.start_date_to)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROJECT_COLUMNS}
                FROM projects p
                WHERE {build_where(clauses)}
                ORDER BY p.updated_at DESC, p.project_id DESC
                """,
                tuple(params),
            )
            return [_to_project(r) for r in fetchall(cur)]

    def create_project(self, *, account_id: int, data: NewProject) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO projects(account_id, title, description, status, start_date, end_date, budget)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(account_id),
                    data.title,
                    data.description,
                    data.status.value,
                    data.start_date,
                    data.end_date,
                    data.budget,
                ),
            )
            return int(cur.lastrowid)

    def update_project(self, project: Project) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE projects
                SET title=%s, description=%s, status=%s, start_date=%s, end_date=%s, budget=%s
                WHERE project_id=%s
                """,
                (
                    project.title,
                    project.description,
                    project.status.value,
                    project.start_date,
                    project.end_date,
                    project.budget,
                    int(project.project_id),
                ),
            )
            return cur.rowcount >= 0

    def delete_project(self, project_id: int) -> bool:
        # tasks go with it (ON DELETE CASCADE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM projects WHERE project_id=%s", (int(project_id),))
            return cur.rowcount > 0

    def project_stats(self, *, account_id: int) -> ProjectStats:
        open_statuses = sorted(s.value for s in OPEN_TASK_STATUSES)
        placeholders = ",".join(["%s"] * len(open_statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(status = %s), 0) AS active,
                    COALESCE(SUM(status = %s), 0) AS completed
                FROM projects
                WHERE account_id=%s
                """,
                (ProjectStatus.IN_PROGRESS.value, ProjectStatus.COMPLETED.value, int(account_id)),
            )
            p = fetchone(cur) or {}
            cur.execute(
                f"""
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(t.status IN ({placeholders})), 0) AS pending
                FROM tasks t
                JOIN projects p ON p.project_id = t.project_id
                WHERE p.account_id=%s
                """,
                tuple(open_statuses) + (int(account_id),),
            )
            t = fetchone(cur) or {}
            return ProjectStats(
                total_projects=int(p.get("total") or 0),
                active_projects=int(p.get("active") or 0),
                completed_projects=int(p.get("completed") or 0),
                total_tasks=int(t.get("total") or 0),
                pending_tasks=int(t.get("pending") or 0),
            )

    def find_owned_task(self, *, account_id: int, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TASK_COLUMNS}
                FROM tasks t
                JOIN projects p ON p.project_id = t.project_id
                WHERE t.task_id=%s AND p.account_id=%s
                """,
                (int(task_id), int(account_id)),
            )
            row = fetchone(cur)
            return _to_task(row) if row else None

    def list_tasks(self, *, account_id: int, filters: TaskFilters) -> Sequence[TaskView]:
        clauses = ["p.account_id=%s"]
        params: list[object] = [int(account_id)]

        if filters.search:
            pattern = like_pattern(filters.search)
            clauses.append("(t.title LIKE %s OR t.description LIKE %s)")
            params.extend([pattern, pattern])
        if filters.status:
            clauses.append("t.status=%s")
            params.append(filters.status.value)
        if filters.priority:
            clauses.append("t.priority=%s")
            params.append(filters.priority.value)
        if filters.assignee_id:
            clauses.append("t.assignee_id=%s")
            params.append(int(filters.assignee_id))
        if filters.project_id:
            clauses.append("t.project_id=%s")
            params.append(int(filters.project_id))
        if filters.due_date_from:
            clauses.append("t.due_date >= %s")
            params.append(filters.due_date_from)
        if filters.due_date_to:
            clauses.append("t.due_date <= %s")
            params.append(filters.due_date_to)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TASK_COLUMNS}, p.title AS project_title,
                       e.employee_code AS assignee_code, e.name AS assignee_name
                FROM tasks t
                JOIN projects p ON p.project_id = t.project_id
                LEFT JOIN employees e ON e.employee_id = t.assignee_id
                WHERE {build_where(clauses)}
                ORDER BY t.updated_at DESC, t.task_id DESC
                """,
                tuple(params),
            )
            return [_to_task_view(r) for r in fetchall(cur)]

    def create_task(self, data: NewTask) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(project_id, title, description, status, priority, estimated_hours,
                                  actual_hours, due_date, assignee_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(data.project_id),
                    data.title,
                    data.description,
                    data.status.value,
                    data.priority.value,
                    data.estimated_hours,
                    data.actual_hours,
                    data.due_date,
                    data.assignee_id,
                ),
            )
            return int(cur.lastrowid)

    def update_task(self, task: Task) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET title=%s, description=%s, status=%s, priority=%s, estimated_hours=%s,
                    actual_hours=%s, due_date=%s, assignee_id=%s
                WHERE task_id=%s
                """,
                (
                    task.title,
                    task.description,
                    task.status.value,
                    task.priority.value,
                    task.estimated_hours,
                    task.actual_hours,
                    task.due_date,
                    task.assignee_id,
                    int(task.task_id),
                ),
            )
            return cur.rowcount >= 0

    def delete_task(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (int(task_id),))
            return cur.rowcount > 0
