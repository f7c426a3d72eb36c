"""
Staff & partner endpoints.

    GET  /api/v1/employees
    POST /api/v1/employees
    PUT  /api/v1/employees/<employee_id>
"""

from flask import Blueprint, g, jsonify, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.middleware.permission_required import require_permission
from ramp_portal.services import employee_service
from ramp_portal.utils.errors import E, api_error

employee_bp = Blueprint("employee", __name__, url_prefix="/api/v1")
register_error_handlers(employee_bp)


@employee_bp.route("/employees", methods=["GET"])
@require_permission("staff.view")
def list_employees():
    employees = employee_service.list_employees(g.current_employee)
    return jsonify({"items": [e.to_dict() for e in employees], "total": len(employees)}), 200


@employee_bp.route("/employees", methods=["POST"])
@require_permission("staff.manage")
def create_employee():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    employee = employee_service.create_employee(g.current_employee, data)
    return jsonify(employee.to_dict()), 201


@employee_bp.route("/employees/<path:employee_id>", methods=["PUT"])
@require_permission("staff.manage")
def update_employee(employee_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    employee = employee_service.update_employee(g.current_employee, employee_id, data)
    return jsonify(employee.to_dict()), 200
