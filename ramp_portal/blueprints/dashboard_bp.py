"""
Program dashboard.

    GET /api/v1/dashboard?start=YYYY-MM-DD&end=YYYY-MM-DD

Both bounds are optional and inclusive on the record's week-ending date.
"""

from flask import Blueprint, g, jsonify, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.middleware.permission_required import require_permission
from ramp_portal.services import dashboard_service
from ramp_portal.utils.errors import E, api_error
from ramp_portal.utils.helpers import parse_date

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/v1")
register_error_handlers(dashboard_bp)


@dashboard_bp.route("/dashboard", methods=["GET"])
@require_permission("dashboard.view")
def get_dashboard():
    bounds = {}
    for name in ("start", "end"):
        raw = request.args.get(name, "").strip()
        bounds[name] = parse_date(raw) if raw else None
        if raw and bounds[name] is None:
            return api_error(E.VALIDATION_INVALID, f"{name} must be a date (YYYY-MM-DD)")
    if bounds["start"] and bounds["end"] and bounds["end"] < bounds["start"]:
        return api_error(E.VALIDATION_INVALID, "end cannot be before start")

    return jsonify(dashboard_service.get_dashboard(g.current_employee, **bounds)), 200
