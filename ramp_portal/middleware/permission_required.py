"""
Permission Decorators — role-based route protection.

Usage:
    @bp.route("/exports/cpa", methods=["GET"])
    @require_permission("export.run")
    def export_cpa():
        ...

The services enforce the same codenames; these decorators only reject
early so that a forbidden request never parses its body.
"""

import functools
import logging

from flask import g

from ramp_portal.services.permission_service import has_any_permission, has_permission
from ramp_portal.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def require_permission(codename: str):
    """Decorator: require the current employee to hold ``codename``."""
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            employee = getattr(g, "current_employee", None)
            if not has_permission(employee, codename):
                logger.warning(
                    "Employee %s denied: missing permission '%s' on %s",
                    getattr(employee, "id", None), codename, f.__name__,
                )
                return api_error(E.FORBIDDEN, "Permission denied", details={"required": codename})
            return f(*args, **kwargs)
        return decorated
    return decorator


def require_any_permission(*codenames: str):
    """Decorator: require at least ONE of the listed permissions."""
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            employee = getattr(g, "current_employee", None)
            if not has_any_permission(employee, codenames):
                logger.warning(
                    "Employee %s denied: missing any of %s on %s",
                    getattr(employee, "id", None), codenames, f.__name__,
                )
                return api_error(
                    E.FORBIDDEN, "Permission denied", details={"required_any": list(codenames)}
                )
            return f(*args, **kwargs)
        return decorated
    return decorator
