"""
Schedule service — shifts, their ordered modules, and cohorts.

On update the module list is replaced wholesale: the payload's order becomes
the stored ``position`` order.
"""

import logging

from ramp_portal.core.exceptions import NotFoundError, ValidationError
from ramp_portal.models import db
from ramp_portal.models.program import Cohort, Shift, ShiftModule
from ramp_portal.services.permission_service import require_permission
from ramp_portal.utils.helpers import parse_amount, parse_date_input

logger = logging.getLogger(__name__)


def _check_range(start, end, field):
    if start and end and end < start:
        raise ValidationError(
            f"{field}_end cannot be before {field}_start",
            details={f"{field}_end": "before start"},
        )


def _build_modules(items) -> list[ShiftModule]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValidationError("modules must be a list", details={"modules": "not a list"})
    modules = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError("each module must be an object", details={"modules": position})
        start = parse_date_input(item.get("planned_start"), f"modules[{position}].planned_start")
        end = parse_date_input(item.get("planned_end"), f"modules[{position}].planned_end")
        _check_range(start, end, f"modules[{position}].planned")
        modules.append(ShiftModule(
            position=position,
            name=(item.get("name") or "").strip(),
            planned_start=start,
            planned_end=end,
        ))
    return modules


def _apply(shift: Shift, data: dict, partial: bool):
    if "name" in data or not partial:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("name is required", details={"name": "required"})
        shift.name = name
    for field in ("planned_start", "planned_end", "actual_start", "actual_end"):
        if field in data or not partial:
            setattr(shift, field, parse_date_input(data.get(field), field))
    if "planned_budget" in data or not partial:
        shift.planned_budget = parse_amount(data.get("planned_budget"), "planned_budget")
    _check_range(shift.planned_start, shift.planned_end, "planned")
    _check_range(shift.actual_start, shift.actual_end, "actual")
    if "modules" in data or not partial:
        shift.modules = _build_modules(data.get("modules"))


def _get(shift_id) -> Shift:
    shift = db.session.get(Shift, shift_id)
    if shift is None:
        raise NotFoundError(resource="Shift", resource_id=shift_id)
    return shift


def list_shifts(actor) -> list[Shift]:
    require_permission(actor, "schedule.view")
    return Shift.query.order_by(Shift.planned_start, Shift.id).all()


def create_shift(actor, data: dict) -> Shift:
    require_permission(actor, "schedule.manage")
    shift = Shift()
    _apply(shift, data, partial=False)
    db.session.add(shift)
    db.session.commit()
    logger.info("Shift created: #%s %s", shift.id, shift.name, extra={"actor_id": actor.id})
    return shift


def update_shift(actor, shift_id: int, data: dict) -> Shift:
    require_permission(actor, "schedule.manage")
    shift = _get(shift_id)
    _apply(shift, data, partial=True)
    db.session.commit()
    logger.info("Shift updated: #%s", shift.id, extra={"actor_id": actor.id})
    return shift


def delete_shift(actor, shift_id: int) -> None:
    require_permission(actor, "schedule.manage")
    shift = _get(shift_id)
    db.session.delete(shift)
    db.session.commit()
    logger.info("Shift deleted: #%s", shift_id, extra={"actor_id": actor.id})


def list_cohorts() -> list[Cohort]:
    return Cohort.query.order_by(Cohort.id).all()
