"""
Portal-wide exception hierarchy.

Services raise these; blueprints register one handler per type and map them
to HTTP status codes, so no service module needs to know about Flask
responses.

Usage:
    from ramp_portal.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="TimeLog", resource_id=42)
    raise ValidationError("actual_hours must be positive", details={"actual_hours": "..."})
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist.

    Maps to HTTP 404.

    Args:
        resource: Human-readable model name (e.g. "Employee", "TimeLog").
        resource_id: The key that was looked up.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input is well-formed but breaks a business rule.

    Maps to HTTP 422.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown, keyed by field name.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when an operation conflicts with the current stored state.

    Maps to HTTP 409.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidTransitionError(ConflictError):
    """Raised when a record cannot move from its status to the requested one."""

    def __init__(self, record_type: str, record_id: int, current: str, target: str) -> None:
        self.record_type = record_type
        self.record_id = record_id
        self.current_status = current
        self.target_status = target
        super().__init__(
            f"Cannot move {record_type} #{record_id} from '{current}' to '{target}'"
        )


class PermissionDeniedError(Exception):
    """Raised when the acting employee lacks a permission.

    Maps to HTTP 403.
    """

    def __init__(self, codename: str, actor_id: str | None = None) -> None:
        self.codename = codename
        self.actor_id = actor_id
        super().__init__(f"Permission denied: {codename}")


class ProfileNotFoundError(Exception):
    """Raised when an authenticated identity has no matching Employee record.

    Maps to HTTP 403; the caller's action is aborted.
    """

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"User profile not found for {email}")
