from __future__ import annotations

from flask import Flask, request

from ..common.http import (
    acting_account_id,
    json_body,
    login_required,
    parse_bool,
    parse_date_field,
    patch_fields,
    respond,
)
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.result import run_action
from .model import EmployeeFilters, EmployeePatch, NewEmployee

_PATCH_FIELDS = (
    "employee_code",
    "name",
    "email",
    "joining_date",
    "basic_salary",
    "department",
    "position",
    "is_active",
)


def _new_employee(body: dict) -> NewEmployee:
    return NewEmployee(
        employee_code=body.get("employee_code") or "",
        name=body.get("name") or "",
        email=body.get("email"),
        joining_date=parse_date_field(body.get("joining_date"), "joining_date"),
        basic_salary=body.get("basic_salary"),
        department=body.get("department"),
        position=body.get("position"),
        is_active=parse_bool(body.get("is_active")) is not False,
    )


def _patch(body: dict) -> EmployeePatch:
    fields = patch_fields(body, _PATCH_FIELDS)
    if "joining_date" in fields:
        fields["joining_date"] = parse_date_field(fields["joining_date"], "joining_date")
    if "is_active" in fields:
        fields["is_active"] = bool(parse_bool(fields["is_active"]))
    return EmployeePatch(**fields)


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @login_required
    def employees_list():
        args = request.args
        filters = EmployeeFilters(
            search=args.get("search"),
            department=args.get("department"),
            is_active=parse_bool(args.get("is_active")),
            page=args.get("page") or 1,
            limit=args.get("limit") or DEFAULT_PAGE_SIZE,
            sort_by=args.get("sort_by") or "created_at",
            sort_order=args.get("sort_order") or "desc",
        )
        return respond(
            run_action(
                lambda: employees.list_employees(acting_account_id(), filters),
                failure_message="Failed to fetch employees",
            )
        )

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @login_required
    def employees_create():
        body = json_body()
        result = run_action(
            lambda: employees.create_employee(acting_account_id(), _new_employee(body)),
            failure_message="Failed to create employee",
        )
        return respond(result, status=201)

    @app.route("/api/employees/stats", methods=["GET"], endpoint="employees_stats")
    @login_required
    def employees_stats():
        return respond(
            run_action(
                lambda: employees.employee_stats(acting_account_id()),
                failure_message="Failed to fetch employee statistics",
            )
        )

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def employees_get(employee_id: int):
        return respond(
            run_action(
                lambda: employees.get_employee(acting_account_id(), employee_id),
                failure_message="Failed to fetch employee",
            )
        )

    @app.route("/api/employees/<int:employee_id>", methods=["PATCH"], endpoint="employees_update")
    @login_required
    def employees_update(employee_id: int):
        body = json_body()
        return respond(
            run_action(
                lambda: employees.update_employee(acting_account_id(), employee_id, _patch(body)),
                failure_message="Failed to update employee",
            )
        )

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @login_required
    def employees_delete(employee_id: int):
        return respond(
            run_action(
                lambda: employees.delete_employee(acting_account_id(), employee_id),
                failure_message="Failed to delete employee",
            )
        )

    @app.route("/api/employees/<int:employee_id>/restore", methods=["POST"], endpoint="employees_restore")
    @login_required
    def employees_restore(employee_id: int):
        return respond(
            run_action(
                lambda: employees.restore_employee(acting_account_id(), employee_id),
                failure_message="Failed to restore employee",
            )
        )
