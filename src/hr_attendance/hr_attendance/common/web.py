"""Flask helpers shared by the feature controllers.

Identity (user_id, role) is put in the session by the external auth layer;
these helpers only read it.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, IllegalTransitionError, ValidationError
from .datetime_utils import parse_iso_date


def serialize(value: Any) -> Any:
    """Dataclasses, enums and dates to plain JSON values (ISO dates)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [serialize(v) for v in value]
    return value


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = serialize(data)
    body.update({k: serialize(v) for k, v in extra.items()})
    return jsonify(body), status


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role") or Role.EMPLOYEE.value)
    except ValueError:
        return Role.EMPLOYEE


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def reviewer_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        if not current_role().is_reviewer:
            return fail("Managers or admins only", 403)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        if current_role() != Role.ADMIN:
            return fail("Admins only", 403)
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def date_arg(name: str, default: Optional[date] = None) -> Optional[date]:
    raw = request.args.get(name)
    if not raw:
        return default
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def date_field(data: dict, name: str) -> date:
    raw = data.get(name)
    if not raw:
        raise ValidationError(f"{name} is required")
    try:
        return parse_iso_date(str(raw))
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(IllegalTransitionError)
    def _transition(e: IllegalTransitionError):
        return fail(str(e), 409)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e), 403)
