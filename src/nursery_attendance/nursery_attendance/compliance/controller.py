from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_endpoint, staff_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.compliance_service

    @app.route("/api/sections/<section>/compliance", methods=["GET"], endpoint="api_section_compliance")
    @json_endpoint
    @staff_required
    def api_section_compliance(section: str):
        return jsonify({"success": True, **service.section_report(section).to_dict()}), 200

    @app.route("/api/compliance", methods=["GET"], endpoint="api_compliance")
    @json_endpoint
    @staff_required
    def api_compliance():
        return jsonify({"success": True, "sections": [r.to_dict() for r in service.all_sections()]}), 200

    @app.route("/api/compliance/alerts", methods=["GET"], endpoint="api_compliance_alerts")
    @json_endpoint
    @staff_required
    def api_compliance_alerts():
        return jsonify({"success": True, "alerts": [a.to_dict() for a in service.alerts()]}), 200
