"""
Bulk seed — loads the initial employees, shifts, cohorts and tooltips.

All writes go into one transaction: either every row lands or none does.
Re-running updates existing rows in place (keyed by id) and never touches
stored passwords.

Usage:
    flask seed-db
    POST /api/v1/admin/seed     (MASTER_ADMIN)
"""

import logging

from flask import current_app

from ramp_portal.models import db
from ramp_portal.models.employee import ROLE_MASTER_ADMIN, Employee
from ramp_portal.models.program import Cohort, Shift, ShiftModule
from ramp_portal.models.settings import TooltipConfig
from ramp_portal.seed_data import (
    INITIAL_COHORTS,
    INITIAL_EMPLOYEES,
    INITIAL_SHIFTS,
    INITIAL_TOOLTIPS,
)
from ramp_portal.services.permission_service import require_permission
from ramp_portal.utils.helpers import parse_date

logger = logging.getLogger(__name__)

_EMPLOYEE_FIELDS = (
    "email", "first_name", "last_name", "role", "wage",
    "planned_program_budget", "fte_operational_hours", "company_name",
)


def _upsert_employees(rows) -> int:
    # Managers first so manager_id always points at an existing row
    for data in sorted(rows, key=lambda r: r.get("manager_id") is not None):
        employee = db.session.get(Employee, data["id"]) or Employee(id=data["id"])
        for field in _EMPLOYEE_FIELDS:
            setattr(employee, field, data.get(field))
        employee.email = employee.email.lower()
        employee.wage = employee.wage or 0.0
        employee.manager_id = data.get("manager_id")
        db.session.add(employee)
        db.session.flush()
    return len(rows)


def _bootstrap_admins(emails) -> int:
    count = 0
    for email in emails:
        email = email.strip().lower()
        employee = Employee.query.filter_by(email=email).first()
        if employee is None:
            employee = Employee(id=email, email=email, first_name=email.split("@")[0], last_name="")
            db.session.add(employee)
        employee.role = ROLE_MASTER_ADMIN
        count += 1
    return count


def _upsert_shifts(rows) -> int:
    for data in rows:
        shift = db.session.get(Shift, data["id"]) or Shift(id=data["id"])
        shift.name = data["name"]
        shift.planned_start = parse_date(data.get("planned_start"))
        shift.planned_end = parse_date(data.get("planned_end"))
        shift.actual_start = parse_date(data.get("actual_start"))
        shift.actual_end = parse_date(data.get("actual_end"))
        shift.planned_budget = data.get("planned_budget") or 0.0
        shift.modules = [
            ShiftModule(
                position=position,
                name=module["name"],
                planned_start=parse_date(module.get("planned_start")),
                planned_end=parse_date(module.get("planned_end")),
            )
            for position, module in enumerate(data.get("modules", []))
        ]
        db.session.add(shift)
    return len(rows)


def _upsert_cohorts(rows) -> int:
    for data in rows:
        cohort = db.session.get(Cohort, data["id"]) or Cohort(id=data["id"])
        cohort.name = data["name"]
        cohort.description = data.get("description")
        db.session.add(cohort)
    return len(rows)


def _upsert_tooltips(mapping) -> int:
    for key, text in mapping.items():
        row = db.session.get(TooltipConfig, key) or TooltipConfig(key=key)
        row.text = text
        db.session.add(row)
    return len(mapping)


def seed_database(actor=None) -> dict:
    """Write the initial data set. ``actor`` is None when run from the CLI."""
    if actor is not None:
        require_permission(actor, "system.seed")

    try:
        counts = {
            "employees": _upsert_employees(INITIAL_EMPLOYEES),
            "bootstrap_admins": _bootstrap_admins(current_app.config.get("BOOTSTRAP_ADMIN_EMAILS") or []),
            "shifts": _upsert_shifts(INITIAL_SHIFTS),
            "cohorts": _upsert_cohorts(INITIAL_COHORTS),
            "tooltips": _upsert_tooltips(INITIAL_TOOLTIPS),
        }
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Seed failed; nothing was written")
        raise

    logger.info("Database seeded: %s", counts,
                extra={"actor_id": actor.id if actor is not None else None})
    return counts
