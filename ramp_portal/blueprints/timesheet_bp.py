"""
Submission endpoints — time logs and travel requests.

Both accept either JSON or multipart form data; receipts are multipart
file fields:

    POST /api/v1/timesheets          files: equipment_receipt, supplies_receipt
    POST /api/v1/travel-requests     file:  receipt
    GET  /api/v1/me/submissions      ?limit=5
    GET  /api/v1/timesheets/options
"""

from flask import Blueprint, g, jsonify, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.middleware.permission_required import require_permission
from ramp_portal.services import timesheet_service
from ramp_portal.utils.errors import E, api_error

timesheet_bp = Blueprint("timesheet", __name__, url_prefix="/api/v1")
register_error_handlers(timesheet_bp)


def _payload():
    if request.mimetype == "multipart/form-data" or request.form:
        return request.form.to_dict()
    return request.get_json(silent=True)


@timesheet_bp.route("/timesheets", methods=["POST"])
@require_permission("timesheets.submit")
def submit_time_log():
    data = _payload()
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object or form data")
    receipts = {
        "equipment": request.files.get("equipment_receipt"),
        "supplies": request.files.get("supplies_receipt"),
    }
    log = timesheet_service.submit_time_log(g.current_employee, data, receipts)
    return jsonify(log.to_dict()), 201


@timesheet_bp.route("/travel-requests", methods=["POST"])
@require_permission("timesheets.submit")
def submit_travel_request():
    data = _payload()
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object or form data")
    trip = timesheet_service.submit_travel_request(
        g.current_employee, data, request.files.get("receipt")
    )
    return jsonify(trip.to_dict()), 201


@timesheet_bp.route("/me/submissions", methods=["GET"])
@require_permission("timesheets.view_own")
def my_submissions():
    limit = request.args.get("limit", 5, type=int)
    return jsonify(timesheet_service.list_my_submissions(g.current_employee, limit)), 200


@timesheet_bp.route("/timesheets/options", methods=["GET"])
def form_options():
    return jsonify(timesheet_service.form_options()), 200
