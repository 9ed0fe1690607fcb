from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import ErrorKind
from ..core.exceptions import ValidationError
from ..core.result import ActionResult
from .datetime_utils import parse_optional_date
from .serialize import to_jsonable

SESSION_KEY = "account_id"

STATUS_BY_KIND = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 400,
    ErrorKind.INTERNAL: 500,
}


def acting_account_id() -> Optional[int]:
    value = session.get(SESSION_KEY)
    return int(value) if value else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not acting_account_id():
            return respond(ActionResult.fail(ErrorKind.UNAUTHORIZED, "Authentication required"))
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def respond(result: ActionResult, *, status: int = 200):
    if result.success:
        return jsonify({"success": True, "data": to_jsonable(result.data)}), status
    payload: dict[str, Any] = {"success": False, "error": result.error}
    if result.errors:
        payload["errors"] = result.errors
    return jsonify(payload), STATUS_BY_KIND.get(result.kind, 500)


def parse_date_field(value: Any, field_name: str) -> Optional[date]:
    """Accept ``date`` objects or YYYY-MM-DD strings; blank means None."""

    if value is None or isinstance(value, date):
        return value
    try:
        return parse_optional_date(str(value))
    except ValueError:
        raise ValidationError("Please enter a valid date", errors={field_name: "Please enter a valid date"})


def parse_bool(value: Any) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def patch_fields(body: dict[str, Any], names) -> dict[str, Any]:
    """Only keys present in the body become patch values; absent keys stay UNSET."""

    return {name: body[name] for name in names if name in body}
