from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_role, current_user_id, json_body, login_required, ok, reviewer_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import ProfileUpdate


def _role(raw) -> Role:
    try:
        return Role(str(raw or Role.EMPLOYEE.value))
    except ValueError:
        raise ValidationError(f"Unknown role: {raw!r}")


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        return ok(service.get(current_user_id()))

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    @reviewer_required
    def employees():
        tracked_only = request.args.get("tracked", "0") in {"1", "true", "yes"}
        return ok(service.list_tracked() if tracked_only else service.list_all())

    @app.route("/api/employees", methods=["POST"], endpoint="api_employee_create")
    @admin_required
    def create_employee():
        data = json_body()
        user_id = service.create_employee(
            current_role=current_role(),
            full_name=data.get("full_name"),
            department=data.get("department"),
            position=data.get("position"),
            role=_role(data.get("role")),
            user_id=data.get("user_id"),
        )
        return ok({"user_id": user_id}, 201, message="Employee created")

    @app.route("/api/employees/<user_id>", methods=["PUT"], endpoint="api_employee_update")
    @admin_required
    def update_employee(user_id: str):
        data = json_body()
        # Role is not part of a profile update; see /role below.
        service.update_profile(
            current_role=current_role(),
            user_id=user_id,
            update=ProfileUpdate(
                full_name=data.get("full_name"),
                department=data.get("department"),
                position=data.get("position"),
            ),
        )
        return ok(message="Profile updated")

    @app.route("/api/employees/<user_id>/role", methods=["PUT"], endpoint="api_employee_role")
    @admin_required
    def assign_role(user_id: str):
        service.assign_role(
            current_role=current_role(),
            current_user_id=current_user_id(),
            user_id=user_id,
            role=_role(json_body().get("role")),
        )
        return ok(message="Role updated")
