"""
Schedule endpoints — shifts with modules, and cohorts.

    GET    /api/v1/shifts
    POST   /api/v1/shifts
    PUT    /api/v1/shifts/<id>
    DELETE /api/v1/shifts/<id>
    GET    /api/v1/cohorts
"""

from flask import Blueprint, g, jsonify, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.middleware.permission_required import require_permission
from ramp_portal.services import shift_service
from ramp_portal.utils.errors import E, api_error

shift_bp = Blueprint("shift", __name__, url_prefix="/api/v1")
register_error_handlers(shift_bp)


@shift_bp.route("/shifts", methods=["GET"])
@require_permission("schedule.view")
def list_shifts():
    shifts = shift_service.list_shifts(g.current_employee)
    return jsonify({"items": [s.to_dict() for s in shifts], "total": len(shifts)}), 200


@shift_bp.route("/shifts", methods=["POST"])
@require_permission("schedule.manage")
def create_shift():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    shift = shift_service.create_shift(g.current_employee, data)
    return jsonify(shift.to_dict()), 201


@shift_bp.route("/shifts/<int:shift_id>", methods=["PUT"])
@require_permission("schedule.manage")
def update_shift(shift_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    shift = shift_service.update_shift(g.current_employee, shift_id, data)
    return jsonify(shift.to_dict()), 200


@shift_bp.route("/shifts/<int:shift_id>", methods=["DELETE"])
@require_permission("schedule.manage")
def delete_shift(shift_id):
    shift_service.delete_shift(g.current_employee, shift_id)
    return "", 204


@shift_bp.route("/cohorts", methods=["GET"])
def list_cohorts():
    cohorts = shift_service.list_cohorts()
    return jsonify({"items": [c.to_dict() for c in cohorts], "total": len(cohorts)}), 200
