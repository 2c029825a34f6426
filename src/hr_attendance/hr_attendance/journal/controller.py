from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    date_arg,
    date_field,
    json_body,
    login_required,
    ok,
    reviewer_required,
)
from ..container import Container
from ..core.enums import JournalStatus, WorkResult
from ..core.exceptions import ValidationError
from .model import is_backdated
from .workflow import journal_permissions


def _work_result(raw):
    if raw is None:
        return None
    try:
        return WorkResult(str(raw))
    except ValueError:
        raise ValidationError(f"Unknown work result: {raw!r}")


def register(app: Flask, container: Container) -> None:
    service = container.journal_service

    def _view(entry):
        tz = container.settings_service.current().timezone
        return {
            "entry": entry,
            "permissions": journal_permissions(entry, current_role(), current_user_id()),
            "is_backdated": is_backdated(entry, tz),
        }

    @app.route("/api/journals", methods=["POST"], endpoint="api_journal_create")
    @login_required
    def create():
        data = json_body()
        journal_id = service.create(
            user_id=current_user_id(),
            entry_date=date_field(data, "date"),
            content=data.get("content"),
            work_result=_work_result(data.get("work_result")) or WorkResult.COMPLETED,
            obstacles=data.get("obstacles"),
            mood=data.get("mood"),
            duration_minutes=int(data.get("duration") or 0),
            submit=bool(data.get("submit")),
        )
        return ok({"id": journal_id}, 201, message="Journal saved")

    @app.route("/api/journals/me", methods=["GET"], endpoint="api_journal_mine")
    @login_required
    def mine():
        return ok([_view(e) for e in service.list_mine(user_id=current_user_id())])

    @app.route("/api/journals/<int:journal_id>", methods=["PUT"], endpoint="api_journal_edit")
    @login_required
    def edit(journal_id: int):
        data = json_body()
        duration = data.get("duration")
        entry = service.edit(
            actor_id=current_user_id(),
            actor_role=current_role(),
            journal_id=journal_id,
            content=data.get("content"),
            work_result=_work_result(data.get("work_result")),
            obstacles=data.get("obstacles"),
            mood=data.get("mood"),
            duration_minutes=int(duration) if duration is not None else None,
        )
        return ok(_view(entry))

    @app.route("/api/journals/<int:journal_id>", methods=["DELETE"], endpoint="api_journal_delete")
    @login_required
    def delete(journal_id: int):
        service.delete(actor_id=current_user_id(), actor_role=current_role(), journal_id=journal_id)
        return ok(message="Journal deleted")

    @app.route("/api/journals/cleanup", methods=["POST"], endpoint="api_journal_cleanup")
    @admin_required
    def cleanup():
        data = json_body()
        if data.get("before"):
            deleted = service.cleanup(
                current_role=current_role(), actor_id=current_user_id(), before=date_field(data, "before")
            )
        else:
            deleted = service.cleanup(
                current_role=current_role(),
                actor_id=current_user_id(),
                start_date=date_field(data, "start"),
                end_date=date_field(data, "end"),
            )
        return ok({"deleted": deleted}, message="Journal cleanup finished")

    @app.route("/api/journals/<int:journal_id>/<action>", methods=["POST"], endpoint="api_journal_transition")
    @login_required
    def transition(journal_id: int, action: str):
        entry = service.transition(
            actor_id=current_user_id(),
            actor_role=current_role(),
            journal_id=journal_id,
            action=action.replace("-", "_"),
            note=json_body().get("note"),
        )
        return ok(_view(entry))

    @app.route("/api/journals/review", methods=["GET"], endpoint="api_journal_review")
    @reviewer_required
    def review_list():
        raw = request.args.get("status")
        try:
            status = JournalStatus(raw) if raw else None
        except ValueError:
            raise ValidationError(f"Unknown status: {raw!r}")
        entries = service.list_for_review(
            current_role=current_role(),
            status=status,
            start_date=date_arg("start"),
            end_date=date_arg("end"),
        )
        return ok([_view(e) for e in entries])
