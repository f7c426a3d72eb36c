"""
Permission Service — role-based permission checks for service operations.

Every privileged service function calls ``require_permission`` with the
acting employee before touching data, so the check holds no matter which
surface (HTTP route, CLI, test) invoked it. Route decorators in
``middleware.permission_required`` repeat the check for early rejection.

Evaluation is deny-by-default: an unknown role or a missing actor has no
permissions.
"""

import logging

from ramp_portal.core.exceptions import PermissionDeniedError
from ramp_portal.models.employee import (
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    ROLE_INDUSTRY_PARTNER,
    ROLE_MANAGER,
    ROLE_MASTER_ADMIN,
)

logger = logging.getLogger(__name__)

_SUBMITTER = frozenset({
    "timesheets.submit",
    "timesheets.view_own",
})

_MANAGER = _SUBMITTER | {
    "approvals.view",
    "approvals.manager",
    "staff.view",
    "schedule.view",
}

_ADMIN = _MANAGER | {
    "approvals.admin",
    "staff.manage",
    "schedule.manage",
    "dashboard.view",
    "export.run",
    "config.manage",
    "financials.view",
}

ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    ROLE_EMPLOYEE: _SUBMITTER,
    ROLE_INDUSTRY_PARTNER: _SUBMITTER,
    ROLE_MANAGER: frozenset(_MANAGER),
    ROLE_ADMIN: frozenset(_ADMIN),
    ROLE_MASTER_ADMIN: frozenset(_ADMIN | {"system.seed"}),
}


def get_permissions(employee) -> frozenset[str]:
    if employee is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(employee.role, frozenset())


def has_permission(employee, codename: str) -> bool:
    return codename in get_permissions(employee)


def has_any_permission(employee, codenames) -> bool:
    perms = get_permissions(employee)
    return any(c in perms for c in codenames)


def require_permission(employee, codename: str) -> None:
    """Raise PermissionDeniedError unless ``employee`` holds ``codename``."""
    if not has_permission(employee, codename):
        actor_id = employee.id if employee is not None else None
        logger.warning(
            "Permission denied: %s lacks %s", actor_id, codename,
            extra={"actor_id": actor_id},
        )
        raise PermissionDeniedError(codename, actor_id)
