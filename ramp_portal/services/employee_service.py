"""
Employee Service — staff & partner management and password login.

New members added from the staff screen are keyed by their email and start
with zero planned budget and zero FTE hours; admins fill those in later.
"""

import logging

from email_validator import EmailNotValidError, validate_email

from ramp_portal.core.exceptions import ConflictError, NotFoundError, ValidationError
from ramp_portal.models import db
from ramp_portal.models.employee import ROLE_EMPLOYEE, VALID_ROLES, Employee
from ramp_portal.services.permission_service import require_permission
from ramp_portal.utils.crypto import hash_password, verify_password
from ramp_portal.utils.helpers import parse_amount

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

# Fields the staff screen may edit in place
_EDITABLE_TEXT = ("first_name", "last_name", "company_name")
_EDITABLE_NUMBERS = ("wage", "planned_program_budget", "fte_operational_hours")


def normalize_email(email: str) -> str:
    if email is not None and not isinstance(email, str):
        raise ValidationError("email must be a string", details={"email": "not a string"})
    try:
        valid = validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email: {e}", details={"email": str(e)})
    return valid.normalized.lower()


def _validate_role(role):
    if role not in VALID_ROLES:
        raise ValidationError(
            f"Invalid role '{role}'",
            details={"role": f"must be one of {sorted(VALID_ROLES)}"},
        )


def _text(data: dict, field: str) -> str:
    value = data.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", details={field: "not a string"})
    return value.strip()


def _validate_manager(manager_id, employee_id=None):
    if not manager_id:
        return None
    if manager_id == employee_id:
        raise ValidationError("An employee cannot manage themselves", details={"manager_id": "self"})
    if db.session.get(Employee, manager_id) is None:
        raise NotFoundError(resource="Employee", resource_id=manager_id)
    return manager_id


def _set_password(employee, password):
    if password is None:
        return
    if not isinstance(password, str):
        raise ValidationError("password must be a string", details={"password": "not a string"})
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            details={"password": "too short"},
        )
    employee.password_hash = hash_password(password)


def get_by_email(email: str) -> Employee | None:
    if not email:
        return None
    return Employee.query.filter_by(email=email.strip().lower()).first()


def list_employees(actor) -> list[Employee]:
    require_permission(actor, "staff.view")
    return Employee.query.order_by(Employee.last_name, Employee.first_name).all()


def create_employee(actor, data: dict) -> Employee:
    """Add a staff member or industry partner.

    Required: email, first_name. Optional: last_name, role (default EMPLOYEE),
    wage, company_name, manager_id, password.
    """
    require_permission(actor, "staff.manage")

    email = normalize_email(data.get("email"))
    first_name = _text(data, "first_name")
    if not first_name:
        raise ValidationError("first_name is required", details={"first_name": "required"})
    role = data.get("role") or ROLE_EMPLOYEE
    _validate_role(role)

    if get_by_email(email) or db.session.get(Employee, email):
        raise ConflictError(f"An employee with email {email} already exists")

    employee = Employee(
        id=email,
        email=email,
        first_name=first_name,
        last_name=_text(data, "last_name"),
        role=role,
        wage=parse_amount(data.get("wage"), "wage"),
        planned_program_budget=0.0,
        fte_operational_hours=0.0,
        company_name=_text(data, "company_name") or None,
        manager_id=_validate_manager(data.get("manager_id")),
    )
    _set_password(employee, data.get("password"))

    db.session.add(employee)
    db.session.commit()

    logger.info("Employee created: %s (%s)", employee.id, role,
                extra={"actor_id": actor.id, "employee_id": employee.id})
    return employee


def update_employee(actor, employee_id: str, data: dict) -> Employee:
    require_permission(actor, "staff.manage")

    employee = db.session.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError(resource="Employee", resource_id=employee_id)

    for field in _EDITABLE_TEXT:
        if field in data:
            value = _text(data, field)
            if field == "first_name" and not value:
                raise ValidationError("first_name cannot be empty", details={"first_name": "required"})
            setattr(employee, field, value or (None if field == "company_name" else ""))
    for field in _EDITABLE_NUMBERS:
        if field in data:
            setattr(employee, field, parse_amount(data[field], field))
    if "role" in data:
        _validate_role(data["role"])
        employee.role = data["role"]
    if "manager_id" in data:
        employee.manager_id = _validate_manager(data["manager_id"], employee.id)
    if "password" in data:
        _set_password(employee, data["password"])

    db.session.commit()

    logger.info("Employee updated: %s", employee.id,
                extra={"actor_id": actor.id, "employee_id": employee.id})
    return employee


def authenticate(email: str, password: str) -> Employee | None:
    """Return the employee whose credentials match, else None."""
    employee = get_by_email(email)
    if employee is None or not employee.password_hash:
        return None
    if not verify_password(password or "", employee.password_hash):
        return None
    return employee


def set_password(email: str, password: str) -> Employee:
    """Operator path (CLI) for setting a login password."""
    employee = get_by_email(email)
    if employee is None:
        raise NotFoundError(resource="Employee", resource_id=email)
    _set_password(employee, password)
    db.session.commit()
    logger.info("Password set for %s", employee.id, extra={"employee_id": employee.id})
    return employee
