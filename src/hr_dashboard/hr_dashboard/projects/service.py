from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence, Type, TypeVar

from ..common.patch import is_set
from ..common.validators import (
    optional_text,
    require_amount,
    require_int_range,
    require_max_length,
    require_min_length,
    require_non_empty,
)
from ..core.enums import ProjectStatus, TaskPriority, TaskStatus
from ..core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import (
    NewProject,
    NewTask,
    Project,
    ProjectDetail,
    ProjectFilters,
    ProjectPatch,
    ProjectStats,
    Task,
    TaskAssignee,
    TaskFilters,
    TaskPatch,
    TaskView,
)
from .repository import ProjectRepository

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _clean_title(value: str) -> str:
    title = require_non_empty(value, "title")
    require_min_length(title, "title", 3)
    return require_max_length(title, "title", 100)


def _clean_description(value: Optional[str]) -> Optional[str]:
    return require_max_length(optional_text(value), "description", 1000)


def _clean_enum(value, enum_type: Type[E], field_name: str, default: Optional[E] = None) -> Optional[E]:
    if value is None or value == "":
        return default
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_type)
        raise ValidationError(f"Invalid {field_name}", errors={field_name: f"{field_name} must be one of {allowed}"})


def _clean_optional_amount(value, field_name: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return require_amount(value, field_name)


def _clean_id(value, field_name: str) -> int:
    return require_int_range(value, field_name, 1, 2_147_483_647)


def _check_dates(project: NewProject | Project) -> None:
    if project.start_date and project.end_date and project.start_date > project.end_date:
        raise ValidationError(
            "End date must be after start date", errors={"end_date": "End date must be after start date"}
        )


class ProjectService:
    """Use cases: projects and their tasks, scoped to one account."""

    def __init__(self, projects: ProjectRepository, employees: EmployeeRepository):
        self._projects = projects
        self._employees = employees

    @staticmethod
    def _require_account(account_id: Optional[int]) -> int:
        if not account_id:
            raise UnauthorizedError("Authentication required")
        return int(account_id)

    def _get_project(self, account_id: int, project_id) -> Project:
        project = None
        if project_id:
            project_id = _clean_id(project_id, "project_id")
            project = self._projects.find_owned_project(account_id=account_id, project_id=project_id)
        if not project:
            raise NotFoundError("Project not found")
        return project

    def _get_task(self, account_id: int, task_id: int) -> Task:
        task = self._projects.find_owned_task(account_id=account_id, task_id=int(task_id))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def _get_assignee(self, account_id: int, employee_id) -> Optional[TaskAssignee]:
        if employee_id is None or employee_id == "":
            return None
        employee_id = _clean_id(employee_id, "assignee_id")
        employee = self._employees.find_owned(account_id=account_id, employee_id=employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return TaskAssignee(employee_id=employee.employee_id, employee_code=employee.employee_code, name=employee.name)

    def _task_view(self, account_id: int, task: Task) -> TaskView:
        project = self._get_project(account_id, task.project_id)
        assignee = self._get_assignee(account_id, task.assignee_id)
        return TaskView(task=task, project_title=project.title, assignee=assignee)

    # Projects

    def create_project(self, account_id: Optional[int], data: NewProject) -> Project:
        account_id = self._require_account(account_id)
        clean = NewProject(
            title=_clean_title(data.title),
            description=_clean_description(data.description),
            status=_clean_enum(data.status, ProjectStatus, "status", ProjectStatus.PLANNING),
            start_date=data.start_date,
            end_date=data.end_date,
            budget=_clean_optional_amount(data.budget, "budget"),
        )
        _check_dates(clean)

        project_id = self._projects.create_project(account_id=account_id, data=clean)
        logger.info("Project %s created by account %s", project_id, account_id)
        return self._get_project(account_id, project_id)

    def get_project(self, account_id: Optional[int], project_id: int) -> ProjectDetail:
        account_id = self._require_account(account_id)
        project = self._get_project(account_id, project_id)
        tasks = self._projects.list_tasks(account_id=account_id, filters=TaskFilters(project_id=project.project_id))
        return ProjectDetail(project=project, tasks=list(tasks))

    def list_projects(self, account_id: Optional[int], filters: Optional[ProjectFilters] = None) -> Sequence[Project]:
        account_id = self._require_account(account_id)
        filters = filters or ProjectFilters()
        filters = replace(
            filters,
            search=optional_text(filters.search),
            status=_clean_enum(filters.status, ProjectStatus, "status"),
        )
        return list(self._projects.list_projects(account_id=account_id, filters=filters))

    def update_project(self, account_id: Optional[int], project_id: int, patch: ProjectPatch) -> Project:
        account_id = self._require_account(account_id)
        current = self._get_project(account_id, project_id)

        changes = {}
        if is_set(patch.title):
            changes["title"] = _clean_title(patch.title)
        if is_set(patch.description):
            changes["description"] = _clean_description(patch.description)
        if is_set(patch.status):
            changes["status"] = _clean_enum(patch.status, ProjectStatus, "status", current.status)
        if is_set(patch.start_date):
            changes["start_date"] = patch.start_date
        if is_set(patch.end_date):
            changes["end_date"] = patch.end_date
        if is_set(patch.budget):
            changes["budget"] = _clean_optional_amount(patch.budget, "budget")

        updated = replace(current, **changes)
        _check_dates(updated)
        self._projects.update_project(updated)
        logger.info("Project %s updated by account %s", current.project_id, account_id)
        return self._get_project(account_id, current.project_id)

    def delete_project(self, account_id: Optional[int], project_id: int) -> None:
        account_id = self._require_account(account_id)
        project = self._get_project(account_id, project_id)
        self._projects.delete_project(project.project_id)
        logger.info("Project %s deleted by account %s", project.project_id, account_id)

    def project_stats(self, account_id: Optional[int]) -> ProjectStats:
        return self._projects.project_stats(account_id=self._require_account(account_id))

    # Tasks

    def create_task(self, account_id: Optional[int], data: NewTask) -> TaskView:
        account_id = self._require_account(account_id)
        project = self._get_project(account_id, data.project_id)
        assignee = self._get_assignee(account_id, data.assignee_id)

        clean = NewTask(
            project_id=project.project_id,
            title=_clean_title(data.title),
            description=_clean_description(data.description),
            status=_clean_enum(data.status, TaskStatus, "status", TaskStatus.TODO),
            priority=_clean_enum(data.priority, TaskPriority, "priority", TaskPriority.MEDIUM),
            estimated_hours=_clean_optional_amount(data.estimated_hours, "estimated_hours"),
            actual_hours=_clean_optional_amount(data.actual_hours, "actual_hours"),
            due_date=data.due_date,
            assignee_id=assignee.employee_id if assignee else None,
        )
        task_id = self._projects.create_task(clean)
        logger.info("Task %s created in project %s", task_id, project.project_id)
        return self._task_view(account_id, self._get_task(account_id, task_id))

    def get_task(self, account_id: Optional[int], task_id: int) -> TaskView:
        account_id = self._require_account(account_id)
        return self._task_view(account_id, self._get_task(account_id, task_id))

    def list_tasks(self, account_id: Optional[int], filters: Optional[TaskFilters] = None) -> Sequence[TaskView]:
        account_id = self._require_account(account_id)
        filters = filters or TaskFilters()
        filters = replace(
            filters,
            search=optional_text(filters.search),
            status=_clean_enum(filters.status, TaskStatus, "status"),
            priority=_clean_enum(filters.priority, TaskPriority, "priority"),
        )
        return list(self._projects.list_tasks(account_id=account_id, filters=filters))

    def update_task(self, account_id: Optional[int], task_id: int, patch: TaskPatch) -> TaskView:
        account_id = self._require_account(account_id)
        current = self._get_task(account_id, task_id)

        changes = {}
        if is_set(patch.title):
            changes["title"] = _clean_title(patch.title)
        if is_set(patch.description):
            changes["description"] = _clean_description(patch.description)
        if is_set(patch.status):
            changes["status"] = _clean_enum(patch.status, TaskStatus, "status", current.status)
        if is_set(patch.priority):
            changes["priority"] = _clean_enum(patch.priority, TaskPriority, "priority", current.priority)
        if is_set(patch.estimated_hours):
            changes["estimated_hours"] = _clean_optional_amount(patch.estimated_hours, "estimated_hours")
        if is_set(patch.actual_hours):
            changes["actual_hours"] = _clean_optional_amount(patch.actual_hours, "actual_hours")
        if is_set(patch.due_date):
            changes["due_date"] = patch.due_date
        if is_set(patch.assignee_id):
            assignee = self._get_assignee(account_id, patch.assignee_id)
            changes["assignee_id"] = assignee.employee_id if assignee else None

        self._projects.update_task(replace(current, **changes))
        logger.info("Task %s updated by account %s", current.task_id, account_id)
        return self._task_view(account_id, self._get_task(account_id, current.task_id))

    def update_task_status(self, account_id: Optional[int], task_id: int, status) -> TaskView:
        self._require_account(account_id)
        if status is None or status == "":
            raise ValidationError("Status is required", errors={"status": "Status is required"})
        return self.update_task(account_id, task_id, TaskPatch(status=status))

    def assign_task(self, account_id: Optional[int], task_id: int, employee_id) -> TaskView:
        self._require_account(account_id)
        if employee_id is None or employee_id == "":
            raise ValidationError("Employee is required", errors={"employee_id": "Employee is required"})
        return self.update_task(account_id, task_id, TaskPatch(assignee_id=employee_id))

    def delete_task(self, account_id: Optional[int], task_id: int) -> None:
        account_id = self._require_account(account_id)
        task = self._get_task(account_id, task_id)
        self._projects.delete_task(task.task_id)
        logger.info("Task %s deleted by account %s", task.task_id, account_id)
