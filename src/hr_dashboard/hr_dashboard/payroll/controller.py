from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..common.http import acting_account_id, json_body, login_required, patch_fields, respond
from ..common.serialize import to_jsonable
from ..container import Container
from .model import SalaryFilters, SalaryInput, SalaryPatch

_PATCH_FIELDS = ("bonus", "deductions", "allowances", "overtime_hours", "overtime_rate", "notes")

_CSV_FIELDS = [
    "year",
    "month",
    "employee_code",
    "employee_name",
    "department",
    "basic_salary",
    "bonus",
    "allowances",
    "overtime_hours",
    "overtime_rate",
    "gross_salary",
    "deductions",
    "net_salary",
    "status",
    "processed_at",
    "notes",
]


def register(app: Flask, container: Container) -> None:
    actions = container.payroll_actions

    def _filters_from_args() -> SalaryFilters:
        args = request.args
        return SalaryFilters(
            month=args.get("month") or None,
            year=args.get("year") or None,
            department=args.get("department") or None,
            status=args.get("status") or None,
            employee_id=args.get("employee_id") or None,
        )

    def _write_salary_csv(*, views, filename: str):
        """Write the filtered salary list to a CSV response."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_CSV_FIELDS)
        writer.writeheader()
        for view in views:
            r = to_jsonable(view)
            writer.writerow(
                {
                    "year": r["year"],
                    "month": r["month"],
                    "employee_code": r["employee"]["employee_code"],
                    "employee_name": r["employee"]["name"],
                    "department": r["employee"]["department"] or "-",
                    "basic_salary": view.record.basic_salary,
                    "bonus": view.record.bonus,
                    "allowances": view.record.allowances,
                    "overtime_hours": view.record.overtime_hours,
                    "overtime_rate": view.record.overtime_rate,
                    "gross_salary": view.gross_salary,
                    "deductions": view.total_deductions,
                    "net_salary": view.net_salary,
                    "status": r["status"],
                    "processed_at": r["processed_at"] or "",
                    "notes": r["notes"] or "",
                }
            )

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/salary", methods=["GET"], endpoint="salary_list")
    @login_required
    def salary_list():
        return respond(actions.list_salary_records(acting_account_id(), _filters_from_args()))

    @app.route("/api/salary", methods=["POST"], endpoint="salary_create")
    @login_required
    def salary_create():
        body = json_body()
        data = SalaryInput(
            employee_id=body.get("employee_id"),
            month=body.get("month"),
            year=body.get("year"),
            bonus=body.get("bonus", 0),
            deductions=body.get("deductions", 0),
            allowances=body.get("allowances", 0),
            overtime_hours=body.get("overtime_hours", 0),
            overtime_rate=body.get("overtime_rate", 0),
            notes=body.get("notes"),
        )
        return respond(actions.create_salary_record(acting_account_id(), data), status=201)

    @app.route("/api/salary/<int:record_id>", methods=["PATCH"], endpoint="salary_update")
    @login_required
    def salary_update(record_id: int):
        patch = SalaryPatch(**patch_fields(json_body(), _PATCH_FIELDS))
        return respond(actions.update_salary_record(acting_account_id(), record_id, patch))

    @app.route("/api/salary/<int:record_id>", methods=["DELETE"], endpoint="salary_delete")
    @login_required
    def salary_delete(record_id: int):
        return respond(actions.delete_salary_record(acting_account_id(), record_id))

    @app.route("/api/salary/<int:record_id>/approve", methods=["POST"], endpoint="salary_approve")
    @login_required
    def salary_approve(record_id: int):
        return respond(actions.approve_salary_record(acting_account_id(), record_id))

    @app.route("/api/salary/generate", methods=["POST"], endpoint="salary_generate")
    @login_required
    def salary_generate():
        body = json_body()
        result = actions.generate_monthly_report(acting_account_id(), month=body.get("month"), year=body.get("year"))
        return respond(result)

    @app.route("/api/salary/stats", methods=["GET"], endpoint="salary_stats")
    @login_required
    def salary_stats():
        args = request.args
        result = actions.get_dashboard_stats(
            acting_account_id(),
            month=args.get("month") or None,
            year=args.get("year") or None,
        )
        return respond(result)

    @app.route("/api/salary/export.csv", methods=["GET"], endpoint="salary_export_csv")
    @login_required
    def salary_export_csv():
        filters = _filters_from_args()
        result = actions.list_salary_records(acting_account_id(), filters)
        if not result.success:
            return respond(result)

        suffix = f"{filters.year or 'all'}_{filters.month or 'all'}"
        return _write_salary_csv(views=result.data, filename=f"salary_report_{suffix}.csv")
