"""
Per-user preferences.

    GET  /api/v1/me/preferences
    PUT  /api/v1/me/preferences      {"theme": "light" | "dark"}
    POST /api/v1/me/welcome          {"show": bool, "message": str | null}
"""

from flask import Blueprint, g, jsonify, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.services import preference_service
from ramp_portal.utils.errors import E, api_error

preference_bp = Blueprint("preference", __name__, url_prefix="/api/v1/me")
register_error_handlers(preference_bp)


@preference_bp.route("/preferences", methods=["GET"])
def get_preferences():
    return jsonify(preference_service.get_preferences(g.current_employee)), 200


@preference_bp.route("/preferences", methods=["PUT"])
def put_preferences():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    return jsonify(preference_service.update_preferences(g.current_employee, data)), 200


@preference_bp.route("/welcome", methods=["POST"])
def welcome():
    return jsonify(preference_service.welcome_banner(g.current_employee)), 200
