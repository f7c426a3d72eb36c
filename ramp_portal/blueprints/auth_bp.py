"""
Authentication endpoints.

    POST /api/v1/auth/login   email + password → bearer token
    GET  /api/v1/auth/me      current employee and permissions
"""

import logging

from flask import Blueprint, g, jsonify, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.services import employee_service
from ramp_portal.services.jwt_service import token_response
from ramp_portal.services.permission_service import get_permissions
from ramp_portal.utils.errors import E, api_error

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
register_error_handlers(auth_bp)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        return api_error(E.VALIDATION_REQUIRED, "email and password are required")

    employee = employee_service.authenticate(email, password)
    if employee is None:
        logger.warning("Failed login for %s", email.lower())
        return api_error(E.UNAUTHORIZED, "Invalid email or password")

    logger.info("Login: %s", employee.id, extra={"employee_id": employee.id})
    body = token_response(employee.email, employee.role)
    body["employee"] = employee.to_dict()
    return jsonify(body), 200


@auth_bp.route("/me", methods=["GET"])
def me():
    employee = g.current_employee
    return jsonify({
        "employee": employee.to_dict(),
        "permissions": sorted(get_permissions(employee)),
    }), 200
