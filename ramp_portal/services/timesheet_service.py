"""
Submission service — employees file weekly time logs and travel requests.

Receipts are written to the object store before the row is committed; if the
commit (or any later validation) fails, every receipt stored for that
submission is deleted again so no orphan objects remain.
"""

import logging

from flask import current_app

from ramp_portal.core.exceptions import ProfileNotFoundError, ValidationError
from ramp_portal.models import db
from ramp_portal.models.timesheet import (
    BUDGET_CATEGORIES,
    DEFAULT_LABOR_CATEGORY,
    LABOR_CATEGORIES,
    TimeLog,
    TravelRequest,
)
from ramp_portal.services import spend_service
from ramp_portal.services.approval_service import initial_status
from ramp_portal.services.permission_service import require_permission
from ramp_portal.services.storage_service import (
    FOLDER_EQUIPMENT,
    FOLDER_SUPPLIES,
    FOLDER_TRAVEL,
    ReceiptStorage,
)
from ramp_portal.utils.helpers import parse_amount, parse_date_input

logger = logging.getLogger(__name__)


def _require_submitter(actor):
    if actor is None:
        raise ProfileNotFoundError("unknown")
    require_permission(actor, "timesheets.submit")


def _discard_receipts(storage, urls):
    for url in urls:
        try:
            storage.delete(url)
        except OSError:
            logger.exception("Could not delete receipt %s after failed submission", url)


def _has_file(file) -> bool:
    return file is not None and bool(getattr(file, "filename", ""))


def submit_time_log(actor, payload: dict, receipts: dict | None = None) -> TimeLog:
    """Validate and store a weekly time log.

    Args:
        actor: Submitting Employee.
        payload: Form fields — week_ending, actual_hours, journal_entry,
            budget_category, equipment_cost, supplies_cost.
        receipts: Optional uploaded files keyed ``equipment`` / ``supplies``.
    """
    _require_submitter(actor)
    receipts = receipts or {}

    week_ending = parse_date_input(payload.get("week_ending"), "week_ending", required=True)
    hours = parse_amount(payload.get("actual_hours"), "actual_hours", required=True, positive=True)
    journal = (payload.get("journal_entry") or "").strip()
    if not journal:
        raise ValidationError("journal_entry is required", details={"journal_entry": "required"})

    category = (payload.get("budget_category") or DEFAULT_LABOR_CATEGORY).strip()
    if category not in LABOR_CATEGORIES:
        raise ValidationError(
            f"Invalid budget_category '{category}'",
            details={"budget_category": f"must be one of {sorted(LABOR_CATEGORIES)}"},
        )

    equipment = parse_amount(payload.get("equipment_cost"), "equipment_cost")
    supplies = parse_amount(payload.get("supplies_cost"), "supplies_cost")

    rate = spend_service.budget_rate(actor)
    log = TimeLog(
        employee_id=actor.id,
        employee_name=actor.full_name,
        week_ending=week_ending,
        actual_hours=hours,
        billable_hours=hours,
        hourly_rate=rate,
        total_cost=hours * rate,
        budget_category=category,
        journal_entry=journal,
        equipment_cost=equipment or None,
        supplies_cost=supplies or None,
        status=initial_status(actor),
    )

    storage = ReceiptStorage()
    stored = []
    try:
        if _has_file(receipts.get("equipment")):
            log.equipment_receipt_url = storage.save(receipts["equipment"], FOLDER_EQUIPMENT)
            stored.append(log.equipment_receipt_url)
        if _has_file(receipts.get("supplies")):
            log.supplies_receipt_url = storage.save(receipts["supplies"], FOLDER_SUPPLIES)
            stored.append(log.supplies_receipt_url)
        db.session.add(log)
        db.session.commit()
    except Exception:
        db.session.rollback()
        _discard_receipts(storage, stored)
        raise

    logger.info(
        "Time log #%s submitted (%.2fh, %s)", log.id, hours, log.status,
        extra={"actor_id": actor.id, "record_type": "time_log", "record_id": log.id},
    )
    return log


def submit_travel_request(actor, payload: dict, receipt=None) -> TravelRequest:
    """Validate and store a travel reimbursement request."""
    _require_submitter(actor)

    week_ending = parse_date_input(payload.get("week_ending"), "week_ending", required=True)
    miles = parse_amount(payload.get("distance_miles"), "distance_miles")
    lodging = parse_amount(payload.get("lodging_cost"), "lodging_cost")
    rate = current_app.config["MILEAGE_RATE"]

    trip = TravelRequest(
        employee_id=actor.id,
        week_ending=week_ending,
        distance_miles=miles,
        lodging_cost=lodging,
        total_reimbursement=spend_service.travel_total(miles, lodging, rate),
        status=initial_status(actor),
    )

    storage = ReceiptStorage()
    stored = []
    try:
        if _has_file(receipt):
            trip.attachment_url = storage.save(receipt, FOLDER_TRAVEL)
            stored.append(trip.attachment_url)
        db.session.add(trip)
        db.session.commit()
    except Exception:
        db.session.rollback()
        _discard_receipts(storage, stored)
        raise

    logger.info(
        "Travel request #%s submitted (%.1f mi, %s)", trip.id, miles, trip.status,
        extra={"actor_id": actor.id, "record_type": "travel_request", "record_id": trip.id},
    )
    return trip


def list_my_submissions(actor, limit: int = 5) -> dict:
    """The actor's most recent time logs and travel requests."""
    if actor is None:
        raise ProfileNotFoundError("unknown")
    require_permission(actor, "timesheets.view_own")
    limit = max(1, min(int(limit), 100))

    logs = (
        TimeLog.query.filter_by(employee_id=actor.id)
        .order_by(TimeLog.created_at.desc(), TimeLog.id.desc())
        .limit(limit)
        .all()
    )
    trips = (
        TravelRequest.query.filter_by(employee_id=actor.id)
        .order_by(TravelRequest.created_at.desc(), TravelRequest.id.desc())
        .limit(limit)
        .all()
    )
    return {
        "time_logs": [log.to_dict() for log in logs],
        "travel_requests": [trip.to_dict() for trip in trips],
    }


def form_options() -> dict:
    """Choices the submission forms offer."""
    return {
        "labor_categories": [c for c in BUDGET_CATEGORIES if c in LABOR_CATEGORIES],
        "default_category": DEFAULT_LABOR_CATEGORY,
        "pre_approval_required": ["Marketing"],
        "mileage_rate": current_app.config["MILEAGE_RATE"],
    }
