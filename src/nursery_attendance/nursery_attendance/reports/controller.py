from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_endpoint, optional_date_arg, staff_required
from ..container import Container
from .service import report_to_csv


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _build():
        group_id = request.args.get("group_id")
        return service.daily_summary(
            day=optional_date_arg(request.args.get("date")),
            section=request.args.get("section") or None,
            group_id=int(group_id) if group_id and group_id.isdigit() else None,
        )

    @app.route("/api/reports/daily", methods=["GET"], endpoint="api_daily_report")
    @json_endpoint
    @staff_required
    def api_daily_report():
        data = _build()
        return jsonify({"success": True, "rows": data.rows, "summary": data.summary}), 200

    @app.route("/api/reports/daily.csv", methods=["GET"], endpoint="api_daily_report_csv")
    @json_endpoint
    @staff_required
    def api_daily_report_csv():
        data = _build()
        day = data.rows[0]["attendance_date"] if data.rows else (request.args.get("date") or "today")
        return app.response_class(
            report_to_csv(data),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_{day}.csv"},
        )
