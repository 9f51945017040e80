from __future__ import annotations

import logging

from flask import Flask, Response, g, jsonify, request

from ..common.http import json_endpoint, optional_date_arg, staff_required
from ..container import Container
from ..core.enums import ScanType
from ..core.exceptions import InvalidCodeFormat, NotFoundError, ValidationError
from ..scans.badges import decode_badge_image, render_badge_png

logger = logging.getLogger(__name__)


def _parse_action(value) -> ScanType | None:
    if value in (None, ""):
        return None
    try:
        return ScanType(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Action must be 'arrival' or 'departure'")


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/scans/preview", methods=["POST"], endpoint="api_scan_preview")
    @json_endpoint
    @staff_required
    def api_scan_preview():
        data = request.get_json(silent=True) or {}
        preview = service.preview_scan(str(data.get("code") or ""))
        return jsonify({"success": True, **preview.to_dict()}), 200

    @app.route("/api/scans", methods=["POST"], endpoint="api_scan")
    @json_endpoint
    @staff_required
    def api_scan():
        """Record a scan. Without an action the suggested one is used."""
        data = request.get_json(silent=True) or {}
        outcome = service.scan(
            str(data.get("code") or ""),
            action=_parse_action(data.get("action")),
            staff_id=g.staff_id,
        )
        return jsonify(outcome.to_dict()), 201

    @app.route("/api/scans/image", methods=["POST"], endpoint="api_scan_image")
    @json_endpoint
    @staff_required
    def api_scan_image():
        """Decode a QR code from an uploaded photo, then record the scan."""
        if "image" not in request.files:
            raise InvalidCodeFormat("Missing image file")

        code = decode_badge_image(request.files["image"].stream)
        outcome = service.scan(code, action=_parse_action(request.form.get("action")), staff_id=g.staff_id)
        return jsonify(outcome.to_dict()), 201

    @app.route("/api/children/<int:child_id>/badge.png", methods=["GET"], endpoint="api_child_badge")
    @json_endpoint
    @staff_required
    def api_child_badge(child_id: int):
        child = container.children_repo.get_by_id(child_id)
        if not child:
            raise NotFoundError("Child not found")
        payload = container.code_resolver.parser.payload_for(child.code_qr_id)
        return Response(render_badge_png(payload), mimetype="image/png")

    @app.route("/api/attendance/<int:child_id>", methods=["GET"], endpoint="api_attendance_day")
    @json_endpoint
    @staff_required
    def api_attendance_day(child_id: int):
        record = service.get_daily(child_id, optional_date_arg(request.args.get("date")))
        return jsonify({"success": True, "attendance": record.to_dict() if record else None}), 200

    @app.route("/api/attendance/<int:child_id>/visits", methods=["GET"], endpoint="api_attendance_visits")
    @json_endpoint
    @staff_required
    def api_attendance_visits(child_id: int):
        visits = service.visits_for_day(child_id, optional_date_arg(request.args.get("date")))
        return jsonify({"success": True, "visits": [v.to_dict() for v in visits]}), 200

    @app.route("/api/attendance/<int:child_id>/present", methods=["POST"], endpoint="api_mark_present")
    @json_endpoint
    @staff_required
    def api_mark_present(child_id: int):
        data = request.get_json(silent=True) or {}
        record = service.mark_present(child_id, day=optional_date_arg(data.get("date")), staff_id=g.staff_id)
        return jsonify({"success": True, "attendance": record.to_dict()}), 200

    @app.route("/api/attendance/<int:child_id>/absent", methods=["POST"], endpoint="api_mark_absent")
    @json_endpoint
    @staff_required
    def api_mark_absent(child_id: int):
        data = request.get_json(silent=True) or {}
        record = service.mark_absent(child_id, day=optional_date_arg(data.get("date")), staff_id=g.staff_id)
        return jsonify({"success": True, "attendance": record.to_dict()}), 200

    @app.route("/api/attendance/<int:child_id>/arrival", methods=["POST"], endpoint="api_record_arrival")
    @json_endpoint
    @staff_required
    def api_record_arrival(child_id: int):
        record = service.record_arrival(child_id, staff_id=g.staff_id)
        return jsonify({"success": True, "attendance": record.to_dict()}), 200

    @app.route("/api/attendance/<int:child_id>/departure", methods=["POST"], endpoint="api_record_departure")
    @json_endpoint
    @staff_required
    def api_record_departure(child_id: int):
        record = service.record_departure(child_id, staff_id=g.staff_id)
        return jsonify({"success": True, "attendance": record.to_dict()}), 200
