"""Uniform JSON error bodies for the API.

Every error response, whether raised by a service and mapped in
``blueprints.register_error_handlers`` or returned directly by a view or
middleware, has the shape::

    {"error": "<message for the UI>", "code": "ERR_...", "details": {...}}

``details`` is omitted when empty.

Usage
-----
    from ramp_portal.utils.errors import api_error, E

    return api_error(E.VALIDATION_INVALID, "end cannot be before start")
"""

from __future__ import annotations

from flask import jsonify


class E:
    """Machine-readable error codes (``ERR_`` prefix)."""

    # Malformed request (bad query string, non-object body) – HTTP 400
    VALIDATION_REQUIRED = "ERR_VALIDATION_REQUIRED"
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"

    # Well-formed but rejected by a field rule – HTTP 422
    VALIDATION_CONSTRAINT = "ERR_VALIDATION_CONSTRAINT"

    # No/bad token – 401; missing permission or employee profile – 403
    UNAUTHORIZED = "ERR_UNAUTHORIZED"
    FORBIDDEN = "ERR_FORBIDDEN"
    PROFILE_MISSING = "ERR_PROFILE_MISSING"

    NOT_FOUND = "ERR_NOT_FOUND"

    # Duplicate email / ledger row – 409; decision not allowed from the record's status – 409
    CONFLICT_DUPLICATE = "ERR_CONFLICT_DUPLICATE"
    CONFLICT_STATE = "ERR_CONFLICT_STATE"

    INTERNAL = "ERR_INTERNAL"


_DEFAULT_STATUS: dict[str, int] = {
    E.VALIDATION_REQUIRED: 400,
    E.VALIDATION_INVALID: 400,
    E.VALIDATION_CONSTRAINT: 422,
    E.UNAUTHORIZED: 401,
    E.FORBIDDEN: 403,
    E.PROFILE_MISSING: 403,
    E.NOT_FOUND: 404,
    E.CONFLICT_DUPLICATE: 409,
    E.CONFLICT_STATE: 409,
    E.INTERNAL: 500,
}


def api_error(code: str, message: str, *, status: int | None = None, details: dict | None = None):
    """Return ``(response, status)`` for an error.

    ``status`` overrides the code's default HTTP status (400 for unknown
    codes).
    """
    body: dict = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status or _DEFAULT_STATUS.get(code, 400)
