from __future__ import annotations

from flask import Flask, request

from ..common.http import acting_account_id, json_body, login_required, parse_date_field, patch_fields, respond
from ..container import Container
from ..core.result import run_action
from .model import NewProject, NewTask, ProjectFilters, ProjectPatch, TaskFilters, TaskPatch

_PROJECT_FIELDS = ("title", "description", "status", "start_date", "end_date", "budget")
_TASK_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "estimated_hours",
    "actual_hours",
    "due_date",
    "assignee_id",
)
_DATE_FIELDS = ("start_date", "end_date", "due_date")


def _with_dates(fields: dict) -> dict:
    for name in _DATE_FIELDS:
        if name in fields:
            fields[name] = parse_date_field(fields[name], name)
    return fields


def _new_project(body: dict) -> NewProject:
    fields = _with_dates(patch_fields(body, _PROJECT_FIELDS))
    fields.setdefault("title", "")
    return NewProject(**fields)


def _new_task(body: dict) -> NewTask:
    fields = _with_dates(patch_fields(body, _TASK_FIELDS))
    fields.setdefault("title", "")
    return NewTask(project_id=body.get("project_id"), **fields)


def register(app: Flask, container: Container) -> None:
    projects = container.project_service

    def _run(func, message: str, *, status: int = 200):
        return respond(run_action(func, failure_message=message), status=status)

    @app.route("/api/projects", methods=["GET"], endpoint="projects_list")
    @login_required
    def projects_list():
        args = request.args

        def load():
            filters = ProjectFilters(
                search=args.get("search"),
                status=args.get("status") or None,
                start_date_from=parse_date_field(args.get("start_date_from"), "start_date_from"),
                start_date_to=parse_date_field(args.get("start_date_to"), "start_date_to"),
            )
            return projects.list_projects(acting_account_id(), filters)

        return _run(load, "Failed to fetch projects")

    @app.route("/api/projects", methods=["POST"], endpoint="projects_create")
    @login_required
    def projects_create():
        body = json_body()
        return _run(
            lambda: projects.create_project(acting_account_id(), _new_project(body)),
            "Failed to create project",
            status=201,
        )

    @app.route("/api/projects/stats", methods=["GET"], endpoint="projects_stats")
    @login_required
    def projects_stats():
        return _run(lambda: projects.project_stats(acting_account_id()), "Failed to fetch project statistics")

    @app.route("/api/projects/<int:project_id>", methods=["GET"], endpoint="projects_get")
    @login_required
    def projects_get(project_id: int):
        return _run(lambda: projects.get_project(acting_account_id(), project_id), "Failed to fetch project")

    @app.route("/api/projects/<int:project_id>", methods=["PATCH"], endpoint="projects_update")
    @login_required
    def projects_update(project_id: int):
        body = json_body()
        return _run(
            lambda: projects.update_project(
                acting_account_id(), project_id, ProjectPatch(**_with_dates(patch_fields(body, _PROJECT_FIELDS)))
            ),
            "Failed to update project",
        )

    @app.route("/api/projects/<int:project_id>", methods=["DELETE"], endpoint="projects_delete")
    @login_required
    def projects_delete(project_id: int):
        return _run(lambda: projects.delete_project(acting_account_id(), project_id), "Failed to delete project")

    @app.route("/api/tasks", methods=["GET"], endpoint="tasks_list")
    @login_required
    def tasks_list():
        args = request.args

        def load():
            filters = TaskFilters(
                search=args.get("search"),
                status=args.get("status") or None,
                priority=args.get("priority") or None,
                assignee_id=args.get("assignee_id", type=int),
                project_id=args.get("project_id", type=int),
                due_date_from=parse_date_field(args.get("due_date_from"), "due_date_from"),
                due_date_to=parse_date_field(args.get("due_date_to"), "due_date_to"),
            )
            return projects.list_tasks(acting_account_id(), filters)

        return _run(load, "Failed to fetch tasks")

    @app.route("/api/tasks", methods=["POST"], endpoint="tasks_create")
    @login_required
    def tasks_create():
        body = json_body()
        return _run(
            lambda: projects.create_task(acting_account_id(), _new_task(body)),
            "Failed to create task",
            status=201,
        )

    @app.route("/api/tasks/<int:task_id>", methods=["GET"], endpoint="tasks_get")
    @login_required
    def tasks_get(task_id: int):
        return _run(lambda: projects.get_task(acting_account_id(), task_id), "Failed to fetch task")

    @app.route("/api/tasks/<int:task_id>", methods=["PATCH"], endpoint="tasks_update")
    @login_required
    def tasks_update(task_id: int):
        body = json_body()
        return _run(
            lambda: projects.update_task(
                acting_account_id(), task_id, TaskPatch(**_with_dates(patch_fields(body, _TASK_FIELDS)))
            ),
            "Failed to update task",
        )

    @app.route("/api/tasks/<int:task_id>/status", methods=["POST"], endpoint="tasks_status")
    @login_required
    def tasks_status(task_id: int):
        body = json_body()
        return _run(
            lambda: projects.update_task_status(acting_account_id(), task_id, body.get("status")),
            "Failed to update task status",
        )

    @app.route("/api/tasks/<int:task_id>/assign", methods=["POST"], endpoint="tasks_assign")
    @login_required
    def tasks_assign(task_id: int):
        body = json_body()
        return _run(
            lambda: projects.assign_task(acting_account_id(), task_id, body.get("employee_id")),
            "Failed to assign task",
        )

    @app.route("/api/tasks/<int:task_id>", methods=["DELETE"], endpoint="tasks_delete")
    @login_required
    def tasks_delete(task_id: int):
        return _run(lambda: projects.delete_task(acting_account_id(), task_id), "Failed to delete task")
