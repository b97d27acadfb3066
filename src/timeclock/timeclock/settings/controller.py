from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_user_id, json_body, json_endpoint, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="get_settings")
    @login_required
    @json_endpoint
    def get_settings():
        settings = container.settings_service.get_settings(current_user_id())
        return jsonify({"success": True, "settings": settings.to_dict()})

    @app.route("/api/settings", methods=["PUT"], endpoint="save_settings")
    @login_required
    @json_endpoint
    def save_settings():
        settings = container.settings_service.save_settings(current_user_id(), json_body())
        return jsonify({"success": True, "settings": settings.to_dict()})
