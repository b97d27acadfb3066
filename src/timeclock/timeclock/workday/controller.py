from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import current_user_id, json_body, json_endpoint, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _view(session_obj, now) -> dict:
        data = session_obj.snapshot(now).to_dict(is_24h=session_obj.settings.is_24h_format)
        data["reminders"] = [r.to_dict() for r in session_obj.reminders(now)]
        return data

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    @json_endpoint
    def dashboard():
        session_obj = container.workday_service.open_session(current_user_id())
        return jsonify({"success": True, "dashboard": _view(session_obj, now_local())})

    @app.route("/api/clock", methods=["POST"], endpoint="clock")
    @login_required
    @json_endpoint
    def clock():
        data = json_body()
        now = now_local()
        with container.workday_service.writing(current_user_id()) as session_obj:
            outcome = session_obj.clock(now, confirm_early_leave=bool(data.get("confirm_early_leave")))
        return jsonify(
            {
                "success": True,
                "action": outcome.label,
                "entry_id": outcome.entry.entry_id,
                "dashboard": _view(session_obj, now),
            }
        ), (201 if outcome.created else 200)

    @app.route("/api/entries/<entry_id>", methods=["PATCH"], endpoint="update_entry_time")
    @login_required
    @json_endpoint
    def update_entry_time(entry_id: str):
        data = json_body()
        entry = container.workday_service.update_entry_time(
            current_user_id(),
            entry_id=entry_id,
            field=str(data.get("field") or ""),
            value=str(data.get("time") or ""),
        )
        return jsonify(
            {
                "success": True,
                "entry": {
                    "id": entry.entry_id,
                    "start_time": entry.start_time.isoformat(),
                    "end_time": entry.end_time.isoformat() if entry.end_time else None,
                },
            }
        )

    @app.route("/api/days/<day>", methods=["DELETE"], endpoint="delete_day")
    @login_required
    @json_endpoint
    def delete_day(day: str):
        deleted = container.workday_service.delete_day(current_user_id(), day=parse_iso_date(day))
        return jsonify({"success": True, "deleted": deleted})

    @app.route("/api/history", methods=["GET"], endpoint="history")
    @login_required
    @json_endpoint
    def history():
        limit = request.args.get("limit", type=int)
        days = container.workday_service.history(current_user_id(), limit=limit)
        return jsonify({"success": True, "days": [d.to_dict() for d in days]})
