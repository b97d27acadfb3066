from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import json_body, json_endpoint, login_required
from ..core.constants import DEFAULT_SESSION_DAYS
from ..container import Container


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    @json_endpoint
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(
            str(data.get("username") or ""),
            str(data.get("password") or ""),
        )

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        return jsonify(
            {
                "success": True,
                "user": {"id": s_user.user_id, "full_name": s_user.full_name, "role": s_user.role.value},
            }
        )

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/register", methods=["POST"], endpoint="register")
    @json_endpoint
    def register_account():
        data = json_body()
        user_id = container.user_service.register(
            full_name=str(data.get("full_name") or ""),
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
        )
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "success": True,
                "user": {"id": session["user_id"], "full_name": session.get("name"), "role": session.get("role")},
            }
        )
