"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import g, jsonify, request, session

from ..core.exceptions import (
    ChildNotFoundOrInactive,
    DomainError,
    DuplicateScanTooSoon,
    GroupFull,
    GroupIncompatible,
    InvalidCodeFormat,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

STAFF_HEADER = "X-Staff-Id"


def current_staff_id() -> Optional[int]:
    """Acting staff id set by the authentication layer (session or header)."""
    raw = session.get("staff_id") or request.headers.get(STAFF_HEADER)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def staff_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        staff_id = current_staff_id()
        if staff_id is None:
            return jsonify({"success": False, "status": "unauthenticated", "message": "Staff login required"}), 401
        g.staff_id = staff_id
        return view(*args, **kwargs)

    return wrapper


def optional_date_arg(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError("Invalid date (YYYY-MM-DD)")


def error_response(e: DomainError):
    body: dict = {"success": False, "message": str(e)}

    if isinstance(e, InvalidCodeFormat):
        body["status"], code = "invalid_code_format", 400
    elif isinstance(e, ChildNotFoundOrInactive):
        body["status"], code = "child_not_found_or_inactive", 404
    elif isinstance(e, DuplicateScanTooSoon):
        body["status"], code = "duplicate_scan_too_soon", 409
        body["elapsed_minutes"] = round(e.elapsed_minutes, 1)
        body["cooldown_minutes"] = e.cooldown_minutes
    elif isinstance(e, GroupIncompatible):
        body["status"], code = "group_incompatible", 422
        body["reason"] = e.verdict.value
        body["age_months"] = e.age_months
    elif isinstance(e, GroupFull):
        body["status"], code = "group_full", 409
        body["reason"] = "full"
        body["capacity"] = e.capacity
        body["occupants"] = e.occupants
    elif isinstance(e, NotFoundError):
        body["status"], code = "not_found", 404
    elif isinstance(e, ValidationError):
        body["status"], code = "invalid", 400
    elif isinstance(e, PersistenceFailure):
        logger.error("persistence failure: %s", e)
        body["status"], code = "persistence_failure", 500
        body["message"] = "Data store error"
    else:
        body["status"], code = "error", 400

    return jsonify(body), code


def json_endpoint(view):
    """Map domain errors to JSON responses and log anything unexpected."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("unexpected error in %s", view.__name__)
            return jsonify({"success": False, "status": "error", "message": "Internal error"}), 500

    return wrapper
