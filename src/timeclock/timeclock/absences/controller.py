from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_role, current_user_id, json_body, json_endpoint, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/absences", methods=["GET"], endpoint="list_absences")
    @login_required
    @json_endpoint
    def list_absences():
        items = container.absence_service.list_for_user(current_user_id())
        return jsonify({"success": True, "absences": [a.to_dict() for a in items]})

    @app.route("/api/absences", methods=["POST"], endpoint="create_absence")
    @login_required
    @json_endpoint
    def create_absence():
        data = json_body()
        created = container.absence_service.create(
            current_user_id(),
            absence_type=data.get("type"),
            start_date=parse_iso_date(str(data.get("start_date") or "")),
            end_date=parse_iso_date(str(data.get("end_date") or "")),
            reason=str(data.get("reason") or ""),
        )
        return jsonify({"success": True, "absence": created.to_dict()}), 201

    @app.route("/api/absences/pending", methods=["GET"], endpoint="pending_absences")
    @login_required
    @json_endpoint
    def pending_absences():
        items = container.absence_service.list_pending(current_role=current_role())
        return jsonify({"success": True, "absences": [a.to_dict() for a in items]})

    @app.route("/api/absences/<request_id>", methods=["GET"], endpoint="get_absence")
    @login_required
    @json_endpoint
    def get_absence(request_id: str):
        item = container.absence_service.get(current_user_id(), request_id)
        return jsonify({"success": True, "absence": item.to_dict()})

    @app.route("/api/absences/<request_id>", methods=["PATCH"], endpoint="update_absence")
    @login_required
    @json_endpoint
    def update_absence(request_id: str):
        data = json_body()
        item = container.absence_service.update(
            current_user_id(),
            request_id,
            absence_type=data.get("type"),
            reason=data.get("reason"),
        )
        return jsonify({"success": True, "absence": item.to_dict()})

    @app.route("/api/absences/<request_id>", methods=["DELETE"], endpoint="delete_absence")
    @login_required
    @json_endpoint
    def delete_absence(request_id: str):
        container.absence_service.delete(current_user_id(), request_id)
        return jsonify({"success": True})

    @app.route("/api/absences/<request_id>/cancel", methods=["POST"], endpoint="cancel_absence")
    @login_required
    @json_endpoint
    def cancel_absence(request_id: str):
        container.absence_service.cancel(current_user_id(), request_id)
        return jsonify({"success": True})

    @app.route("/api/users/<user_id>/absences/<request_id>/approve", methods=["POST"], endpoint="approve_absence")
    @login_required
    @json_endpoint
    def approve_absence(user_id: str, request_id: str):
        container.absence_service.approve(
            current_role=current_role(),
            approver_id=current_user_id(),
            user_id=user_id,
            request_id=request_id,
            comments=str(json_body().get("comments") or ""),
        )
        return jsonify({"success": True})

    @app.route("/api/users/<user_id>/absences/<request_id>/reject", methods=["POST"], endpoint="reject_absence")
    @login_required
    @json_endpoint
    def reject_absence(user_id: str, request_id: str):
        container.absence_service.reject(
            current_role=current_role(),
            approver_id=current_user_id(),
            user_id=user_id,
            request_id=request_id,
            rejection_reason=str(json_body().get("rejection_reason") or ""),
        )
        return jsonify({"success": True})
