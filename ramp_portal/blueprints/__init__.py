"""
API blueprints. Every blueprint maps the service-layer exceptions the same
way through ``register_error_handlers``.
"""

import logging

from flask import request
from werkzeug.exceptions import HTTPException

from ramp_portal.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ProfileNotFoundError,
    ValidationError,
)
from ramp_portal.models import db
from ramp_portal.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def register_error_handlers(bp):
    """Attach the standard exception → HTTP mapping to ``bp``."""

    @bp.errorhandler(NotFoundError)
    def _handle_not_found(error: NotFoundError):
        return api_error(E.NOT_FOUND, str(error))

    @bp.errorhandler(ValidationError)
    def _handle_validation(error: ValidationError):
        return api_error(E.VALIDATION_CONSTRAINT, str(error), details=error.details)

    @bp.errorhandler(InvalidTransitionError)
    def _handle_transition(error: InvalidTransitionError):
        return api_error(E.CONFLICT_STATE, str(error), details={
            "current_status": error.current_status,
            "target_status": error.target_status,
        })

    @bp.errorhandler(ConflictError)
    def _handle_conflict(error: ConflictError):
        return api_error(E.CONFLICT_DUPLICATE, str(error))

    @bp.errorhandler(PermissionDeniedError)
    def _handle_forbidden(error: PermissionDeniedError):
        return api_error(E.FORBIDDEN, "Permission denied", details={"required": error.codename})

    @bp.errorhandler(ProfileNotFoundError)
    def _handle_profile_missing(error: ProfileNotFoundError):
        return api_error(E.PROFILE_MISSING, str(error))

    @bp.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        db.session.rollback()
        logger.exception("Unexpected error in %s endpoint=%s", bp.name, request.endpoint)
        return api_error(E.INTERNAL, "Internal server error")
