from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.patch import UNSET, Maybe
from ..core.enums import ProjectStatus, TaskPriority, TaskStatus


@dataclass(frozen=True)
class Project:
    project_id: int
    account_id: int
    title: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewProject:
    title: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = None


@dataclass(frozen=True)
class ProjectPatch:
    title: Maybe[str] = UNSET
    description: Maybe[Optional[str]] = UNSET
    status: Maybe[ProjectStatus] = UNSET
    start_date: Maybe[Optional[date]] = UNSET
    end_date: Maybe[Optional[date]] = UNSET
    budget: Maybe[Optional[Decimal]] = UNSET


@dataclass(frozen=True)
class ProjectFilters:
    search: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date_from: Optional[date] = None
    start_date_to: Optional[date] = None


@dataclass(frozen=True)
class Task:
    task_id: int
    project_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    due_date: Optional[date] = None
    assignee_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewTask:
    project_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    due_date: Optional[date] = None
    assignee_id: Optional[int] = None


@dataclass(frozen=True)
class TaskPatch:
    title: Maybe[str] = UNSET
    description: Maybe[Optional[str]] = UNSET
    status: Maybe[TaskStatus] = UNSET
    priority: Maybe[TaskPriority] = UNSET
    estimated_hours: Maybe[Optional[Decimal]] = UNSET
    actual_hours: Maybe[Optional[Decimal]] = UNSET
    due_date: Maybe[Optional[date]] = UNSET
    assignee_id: Maybe[Optional[int]] = UNSET


@dataclass(frozen=True)
class TaskFilters:
    search: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[int] = None
    project_id: Optional[int] = None
    due_date_from: Optional[date] = None
    due_date_to: Optional[date] = None


@dataclass(frozen=True)
class TaskAssignee:
    employee_id: int
    employee_code: str
    name: str


@dataclass(frozen=True)
class TaskView:
    """Task with its assignee and owning project title, as the board displays it."""

    task: Task
    project_title: str
    assignee: Optional[TaskAssignee] = None

    def to_dict(self) -> dict:
        t = self.task
        return {
            "task_id": t.task_id,
            "project_id": t.project_id,
            "project_title": self.project_title,
            "title": t.title,
            "description": t.description,
            "status": t.status,
            "priority": t.priority,
            "estimated_hours": t.estimated_hours,
            "actual_hours": t.actual_hours,
            "due_date": t.due_date,
            "assignee": self.assignee,
            "created_at": t.created_at,
            "updated_at": t.updated_at,
        }


@dataclass(frozen=True)
class ProjectDetail:
    project: Project
    tasks: list[TaskView] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"project": self.project, "tasks": self.tasks}


@dataclass(frozen=True)
class ProjectStats:
    total_projects: int
    active_projects: int
    completed_projects: int
    total_tasks: int
    pending_tasks: int
