from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import current_user_id, date_arg, json_body, json_endpoint, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/analytics", methods=["GET"], endpoint="report_analytics")
    @login_required
    @json_endpoint
    def report_analytics():
        report = container.report_service.analytics_for_user(
            current_user_id(),
            now=now_local(),
            start=date_arg("start"),
            end=date_arg("end"),
        )
        return jsonify({"success": True, "analytics": report.to_dict()})

    @app.route("/api/reports/time-pattern", methods=["GET"], endpoint="report_time_pattern")
    @login_required
    @json_endpoint
    def report_time_pattern():
        pattern = container.report_service.time_pattern_for_user(
            current_user_id(),
            now=now_local(),
            period_kind=request.args.get("period") or "monthly",
            start=date_arg("start"),
            end=date_arg("end"),
        )
        return jsonify({"success": True, "time_pattern": pattern.to_dict()})

    @app.route("/api/reports/wellness", methods=["GET"], endpoint="report_wellness")
    @login_required
    @json_endpoint
    def report_wellness():
        day = date_arg("day", default=now_local().date())
        metric = container.report_service.wellness_for_user(current_user_id(), day=day)
        return jsonify({"success": True, "wellness": metric.to_dict()})

    @app.route("/api/reports/daily-totals", methods=["GET"], endpoint="report_daily_totals")
    @login_required
    @json_endpoint
    def report_daily_totals():
        totals = container.report_service.daily_totals_for_user(current_user_id())
        return jsonify({"success": True, "totals": totals})

    @app.route("/api/reports/days/<day>", methods=["GET"], endpoint="report_day_details")
    @login_required
    @json_endpoint
    def report_day_details(day: str):
        details = container.report_service.day_details(current_user_id(), day=parse_iso_date(day))
        return jsonify({"success": True, "day": details.to_dict()})

    @app.route("/api/reports/export.csv", methods=["GET"], endpoint="report_export_csv")
    @login_required
    @json_endpoint
    def report_export_csv():
        today = now_local().date()
        export = container.report_service.export_csv(
            current_user_id(),
            start=date_arg("start", default=today.replace(day=1)),
            end=date_arg("end", default=today),
        )
        return app.response_class(
            export.content.encode("utf-8"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )

    @app.route("/api/time-bank", methods=["GET"], endpoint="time_bank")
    @login_required
    @json_endpoint
    def time_bank():
        summary = container.time_bank_service.summary_for_user(current_user_id(), now=now_local())
        return jsonify({"success": True, "time_bank": summary})

    @app.route("/api/time-bank/adjust", methods=["POST"], endpoint="time_bank_adjust")
    @login_required
    @json_endpoint
    def time_bank_adjust():
        data = json_body()
        settings = container.time_bank_service.adjust(
            current_user_id(),
            sign=str(data.get("sign") or ""),
            value=str(data.get("value") or ""),
        )
        summary = container.time_bank_service.summary_for_user(current_user_id(), now=now_local())
        return jsonify(
            {
                "success": True,
                "adjustment_ms": settings.time_bank_adjustment_ms,
                "time_bank": summary,
            }
        )
