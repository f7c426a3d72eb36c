"""
Portal configuration and administration.

    GET  /api/v1/config/tooltips
    PUT  /api/v1/config/tooltips     replaces the whole map
    GET  /api/v1/config/program      budget caps, grant, mileage rate
    POST /api/v1/admin/seed          load the initial data set
"""

from flask import Blueprint, current_app, g, jsonify, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.middleware.permission_required import require_permission
from ramp_portal.services import seed_service, tooltip_service

config_bp = Blueprint("config", __name__, url_prefix="/api/v1")
register_error_handlers(config_bp)


@config_bp.route("/config/tooltips", methods=["GET"])
def get_tooltips():
    return jsonify(tooltip_service.get_tooltips()), 200


@config_bp.route("/config/tooltips", methods=["PUT"])
@require_permission("config.manage")
def put_tooltips():
    data = request.get_json(silent=True)
    return jsonify(tooltip_service.replace_tooltips(g.current_employee, data)), 200


@config_bp.route("/config/program", methods=["GET"])
@require_permission("dashboard.view")
def program_settings():
    cfg = current_app.config
    return jsonify({
        "budget_caps": cfg["BUDGET_CAPS"],
        "external_grant_amount": cfg["EXTERNAL_GRANT_AMOUNT"],
        "grant_category": cfg["GRANT_CATEGORY"],
        "mileage_rate": cfg["MILEAGE_RATE"],
    }), 200


@config_bp.route("/admin/seed", methods=["POST"])
@require_permission("system.seed")
def seed():
    counts = seed_service.seed_database(g.current_employee)
    return jsonify({"seeded": counts}), 200
