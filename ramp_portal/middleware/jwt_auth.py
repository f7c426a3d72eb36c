"""
JWT Auth Middleware — resolves the bearer token to ``g.current_employee``.

Every ``/api/v1/`` route except the skip list requires a valid access token:
  - missing / malformed / expired token  → 401
  - valid token, no Employee for its email → 403 (profile missing)

Downstream code reads ``g.current_employee`` and never re-parses the header.
"""

import logging

import jwt as pyjwt
from flask import g, request

from ramp_portal.models.employee import Employee
from ramp_portal.services.jwt_service import decode_access_token
from ramp_portal.utils.errors import E, api_error

logger = logging.getLogger(__name__)

# Paths that skip JWT auth entirely
JWT_SKIP_PREFIXES = (
    "/api/v1/auth/login",
    "/api/v1/health",
)


def _bearer_token():
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.current_employee = None
        g.employee_id = None
        g.jwt_email = None

        path = request.path
        if request.method == "OPTIONS" or not path.startswith("/api/v1/"):
            return None
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return None

        token = _bearer_token()
        if token is None:
            return api_error(E.UNAUTHORIZED, "Authentication required")

        try:
            payload = decode_access_token(token)
        except pyjwt.ExpiredSignatureError:
            return api_error(E.UNAUTHORIZED, "Token expired")
        except pyjwt.InvalidTokenError:
            return api_error(E.UNAUTHORIZED, "Invalid token")

        email = payload["sub"].strip().lower()
        g.jwt_email = email
        employee = Employee.query.filter_by(email=email).first()
        if employee is None:
            logger.warning("Authenticated identity without profile: %s", email)
            return api_error(E.PROFILE_MISSING, f"User profile not found for {email}")

        g.current_employee = employee
        g.employee_id = employee.id
        return None
