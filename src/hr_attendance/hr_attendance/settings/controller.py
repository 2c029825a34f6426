from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_role, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.settings_service

    @app.route("/api/settings", methods=["GET"], endpoint="api_settings")
    @login_required
    def current():
        return ok(service.current())

    @app.route("/api/settings", methods=["PUT"], endpoint="api_settings_update")
    @admin_required
    def update():
        values = {str(k): str(v) for k, v in json_body().items()}
        settings = service.update(current_role=current_role(), values=values)
        return ok(settings, message="Settings saved")
