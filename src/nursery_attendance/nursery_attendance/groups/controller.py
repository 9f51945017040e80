from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_age
from ..common.http import json_endpoint, staff_required
from ..common.validators import require_positive_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.assignment_service

    @app.route("/api/children/<int:child_id>/group-options", methods=["GET"], endpoint="api_group_options")
    @json_endpoint
    @staff_required
    def api_group_options(child_id: int):
        options = service.group_options(child_id)
        age = options[0].age_months if options else None
        return jsonify(
            {
                "success": True,
                "age_months": age,
                "age": format_age(age) if age is not None else None,
                "options": [o.to_dict() for o in options],
            }
        ), 200

    @app.route("/api/children/<int:child_id>/assign-group", methods=["POST"], endpoint="api_assign_group")
    @json_endpoint
    @staff_required
    def api_assign_group(child_id: int):
        data = request.get_json(silent=True) or {}
        group_id = require_positive_int(data.get("group_id"), "group_id")
        decision = service.assign_child(child_id, group_id)
        return jsonify({"success": True, "status": "assigned", "assignment": decision.to_dict()}), 200

    @app.route("/api/children/<int:child_id>/auto-assign", methods=["POST"], endpoint="api_auto_assign")
    @json_endpoint
    @staff_required
    def api_auto_assign(child_id: int):
        decision = service.auto_assign(child_id)
        if decision is None:
            return jsonify({"success": False, "status": "unassigned", "reason": "no_eligible_group"}), 200
        return jsonify({"success": True, "status": "assigned", "assignment": decision.to_dict()}), 200

    @app.route("/api/children/<int:child_id>/section", methods=["POST"], endpoint="api_change_section")
    @json_endpoint
    @staff_required
    def api_change_section(child_id: int):
        data = request.get_json(silent=True) or {}
        decision = service.change_section(child_id, str(data.get("section") or ""))
        return jsonify(
            {
                "success": True,
                "status": "assigned" if decision else "unassigned",
                "assignment": decision.to_dict() if decision else None,
            }
        ), 200
