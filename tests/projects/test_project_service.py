from datetime import date
from decimal import Decimal

import pytest

from src.hr_dashboard.hr_dashboard.core.enums import ProjectStatus, TaskPriority, TaskStatus
from src.hr_dashboard.hr_dashboard.core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from src.hr_dashboard.hr_dashboard.projects.model import (
    NewProject,
    NewTask,
    ProjectFilters,
    ProjectPatch,
    TaskFilters,
    TaskPatch,
)
from src.hr_dashboard.hr_dashboard.projects.service import ProjectService


@pytest.fixture
def service(projects_repo, employees_repo):
    return ProjectService(projects_repo, employees_repo)


@pytest.fixture
def project(service):
    return service.create_project(1, NewProject(title="Website Redesign", budget=Decimal("12000")))


def test_create_project_defaults_to_planning(project):
    assert project.status == ProjectStatus.PLANNING
    assert project.budget == Decimal("12000")
    assert project.account_id == 1


@pytest.mark.parametrize(
    "data, field",
    [
        (NewProject(title="ab"), "title"),
        (NewProject(title="x" * 101), "title"),
        (NewProject(title="Valid", description="d" * 1001), "description"),
        (NewProject(title="Valid", status="ARCHIVED"), "status"),
        (NewProject(title="Valid", budget="-5"), "budget"),
        (NewProject(title="Valid", start_date=date(2024, 6, 2), end_date=date(2024, 6, 1)), "end_date"),
    ],
)
def test_create_project_validates(service, data, field):
    with pytest.raises(ValidationError) as exc:
        service.create_project(1, data)

    assert field in exc.value.errors


def test_update_project_checks_merged_dates(service, project):
    service.update_project(1, project.project_id, ProjectPatch(start_date=date(2024, 1, 1), end_date=date(2024, 3, 1)))

    with pytest.raises(ValidationError):
        service.update_project(1, project.project_id, ProjectPatch(start_date=date(2024, 4, 1)))

    updated = service.update_project(1, project.project_id, ProjectPatch(status="IN_PROGRESS", budget=None))
    assert updated.status == ProjectStatus.IN_PROGRESS
    assert updated.budget is None
    assert updated.start_date == date(2024, 1, 1)


def test_list_projects_filters_and_orders_by_last_update(service, project):
    other = service.create_project(1, NewProject(title="Mobile App", status="IN_PROGRESS"))
    service.create_project(2, NewProject(title="Not Mine"))
    service.update_project(1, project.project_id, ProjectPatch(description="refresh landing pages"))

    everything = service.list_projects(1)
    in_progress = service.list_projects(1, ProjectFilters(status="IN_PROGRESS"))
    searched = service.list_projects(1, ProjectFilters(search="landing"))

    assert [p.project_id for p in everything] == [project.project_id, other.project_id]
    assert [p.title for p in in_progress] == ["Mobile App"]
    assert [p.title for p in searched] == ["Website Redesign"]


def test_foreign_project_is_not_found(service):
    foreign = service.create_project(2, NewProject(title="Not Mine"))

    with pytest.raises(NotFoundError):
        service.get_project(1, foreign.project_id)
    with pytest.raises(NotFoundError):
        service.create_task(1, NewTask(project_id=foreign.project_id, title="Sneak in"))


def test_create_task_with_assignee(service, employees_repo, project):
    dev = employees_repo.add(1, "EMP001", "John Smith", 75000)

    view = service.create_task(
        1, NewTask(project_id=project.project_id, title="Build header", assignee_id=dev.employee_id, estimated_hours="6")
    )

    assert view.task.status == TaskStatus.TODO
    assert view.task.priority == TaskPriority.MEDIUM
    assert view.task.estimated_hours == Decimal("6")
    assert view.project_title == "Website Redesign"
    assert view.assignee.employee_code == "EMP001"


def test_task_assignee_must_belong_to_account(service, employees_repo, project):
    stranger = employees_repo.add(2, "EMP001", "Someone Else", 50000)

    with pytest.raises(NotFoundError) as exc:
        service.create_task(1, NewTask(project_id=project.project_id, title="Build header", assignee_id=stranger.employee_id))

    assert str(exc.value) == "Employee not found"


def test_status_and_assignment_shortcuts(service, employees_repo, project):
    dev = employees_repo.add(1, "EMP001", "John Smith", 75000)
    task = service.create_task(1, NewTask(project_id=project.project_id, title="Build header")).task

    moved = service.update_task_status(1, task.task_id, "IN_REVIEW")
    assigned = service.assign_task(1, task.task_id, dev.employee_id)
    unassigned = service.update_task(1, task.task_id, TaskPatch(assignee_id=None))

    assert moved.task.status == TaskStatus.IN_REVIEW
    assert assigned.assignee.name == "John Smith"
    assert unassigned.assignee is None
    with pytest.raises(ValidationError):
        service.update_task_status(1, task.task_id, "")
    with pytest.raises(ValidationError):
        service.assign_task(1, task.task_id, None)
    with pytest.raises(UnauthorizedError):
        service.assign_task(None, task.task_id, dev.employee_id)


def test_project_detail_lists_its_tasks(service, project):
    service.create_task(1, NewTask(project_id=project.project_id, title="First task"))
    service.create_task(1, NewTask(project_id=project.project_id, title="Second task", priority="HIGH"))

    detail = service.get_project(1, project.project_id)
    high = service.list_tasks(1, TaskFilters(priority="HIGH"))

    assert [v.task.title for v in detail.tasks] == ["Second task", "First task"]
    assert [v.task.title for v in high] == ["Second task"]


def test_deleting_project_removes_tasks_and_updates_stats(service, projects_repo, project):
    task = service.create_task(1, NewTask(project_id=project.project_id, title="First task")).task
    done = service.create_task(1, NewTask(project_id=project.project_id, title="Done task", status="DONE")).task
    service.create_project(1, NewProject(title="Shipped", status="COMPLETED"))

    stats = service.project_stats(1)
    assert (stats.total_projects, stats.completed_projects, stats.total_tasks, stats.pending_tasks) == (2, 1, 2, 1)

    service.delete_project(1, project.project_id)

    assert task.task_id not in projects_repo.tasks
    assert done.task_id not in projects_repo.tasks
    with pytest.raises(NotFoundError):
        service.get_task(1, task.task_id)


def test_delete_task(service, project):
    task = service.create_task(1, NewTask(project_id=project.project_id, title="First task")).task

    service.delete_task(1, task.task_id)

    with pytest.raises(NotFoundError):
        service.delete_task(1, task.task_id)
