"""
Approval workflow — status transitions for time logs and travel requests,
and the spend ledger they feed.

Status machine:

    pending_manager ──manager approve──▶ pending_admin
    pending_manager ──admin approve────▶ approved
    pending_admin   ──admin approve────▶ approved
    pending_manager ──manager/admin reject──▶ rejected
    pending_admin   ──admin reject─────▶ rejected

``approved`` and ``rejected`` are terminal. Reaching ``approved`` appends one
SpendLedgerEntry (when the amount is positive) in the same transaction as
the status write; the ledger's unique (record_type, record_id) key stops a
record from ever being counted twice.

Usage:
    from ramp_portal.services.approval_service import decide

    record = decide(actor, "time_log", 42, "approve")
"""

import logging
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError

from ramp_portal.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ramp_portal.models import db
from ramp_portal.models.ledger import SpendLedgerEntry
from ramp_portal.models.timesheet import (
    RECORD_TIME_LOG,
    RECORD_TRAVEL,
    STATUS_APPROVED,
    STATUS_PENDING_ADMIN,
    STATUS_PENDING_MANAGER,
    STATUS_REJECTED,
    TimeLog,
    TravelRequest,
)
from ramp_portal.services import spend_service
from ramp_portal.services.permission_service import has_permission, require_permission

logger = logging.getLogger(__name__)

DECISION_APPROVE = "approve"
DECISION_REJECT = "reject"
VALID_DECISIONS = frozenset({DECISION_APPROVE, DECISION_REJECT})

AUTHORITY_MANAGER = "manager"
AUTHORITY_ADMIN = "admin"

# (decision, authority) → allowed source states and target state
TRANSITIONS = {
    (DECISION_APPROVE, AUTHORITY_MANAGER): {
        "from": [STATUS_PENDING_MANAGER], "to": STATUS_PENDING_ADMIN,
    },
    (DECISION_APPROVE, AUTHORITY_ADMIN): {
        "from": [STATUS_PENDING_MANAGER, STATUS_PENDING_ADMIN], "to": STATUS_APPROVED,
    },
    (DECISION_REJECT, AUTHORITY_MANAGER): {
        "from": [STATUS_PENDING_MANAGER], "to": STATUS_REJECTED,
    },
    (DECISION_REJECT, AUTHORITY_ADMIN): {
        "from": [STATUS_PENDING_MANAGER, STATUS_PENDING_ADMIN], "to": STATUS_REJECTED,
    },
}

# Terminal state each decision settles on; repeating it is a no-op
_SETTLED = {
    DECISION_APPROVE: STATUS_APPROVED,
    DECISION_REJECT: STATUS_REJECTED,
}

_MODELS = {
    RECORD_TIME_LOG: TimeLog,
    RECORD_TRAVEL: TravelRequest,
}


# ── Routing ───────────────────────────────────────────────────────────────────


def initial_status(employee) -> str:
    """Status a new submission from ``employee`` starts in.

    Submitters listed in MANAGER_REVIEW_LEADS, and their direct reports, go
    through manager review first; everyone else goes straight to admins.
    """
    leads = set(current_app.config.get("MANAGER_REVIEW_LEADS") or ())
    if employee is not None and (employee.id in leads or employee.manager_id in leads):
        return STATUS_PENDING_MANAGER
    return STATUS_PENDING_ADMIN


# ── Helpers ───────────────────────────────────────────────────────────────────


def _authority(actor) -> str:
    if has_permission(actor, "approvals.admin"):
        return AUTHORITY_ADMIN
    if has_permission(actor, "approvals.manager"):
        return AUTHORITY_MANAGER
    raise PermissionDeniedError("approvals.manager", getattr(actor, "id", None))


def get_record(record_type: str, record_id: int):
    model = _MODELS.get(record_type)
    if model is None:
        raise ValidationError(
            f"Unknown record type '{record_type}'",
            details={"record_type": f"must be one of {sorted(_MODELS)}"},
        )
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFoundError(resource=model.__name__, resource_id=record_id)
    return record


def record_amount(record_type: str, record) -> float:
    """Amount an approved record contributes to spend."""
    if record_type == RECORD_TIME_LOG:
        return spend_service.time_log_amount(record, record.employee)
    return spend_service.travel_amount(record)


# ── Public API ────────────────────────────────────────────────────────────────


def decide(actor, record_type: str, record_id: int, decision: str):
    """Apply an approve / reject decision and return the updated record.

    Raises:
        PermissionDeniedError: actor can neither manager- nor admin-approve.
        ValidationError: unknown decision or record type.
        NotFoundError: no such record.
        InvalidTransitionError: the record's status does not allow it, or
            another decision moved it after it was read.
        ConflictError: a concurrent approval already booked the record.
    """
    if decision not in VALID_DECISIONS:
        raise ValidationError(
            f"Unknown decision '{decision}'",
            details={"decision": "must be 'approve' or 'reject'"},
        )
    authority = _authority(actor)
    record = get_record(record_type, record_id)
    rule = TRANSITIONS[(decision, authority)]
    current = record.status

    if current == _SETTLED[decision] or current == rule["to"]:
        logger.info(
            "Decision already applied to %s #%s (%s)", record_type, record_id, current,
            extra={"actor_id": actor.id, "record_type": record_type,
                   "record_id": record_id, "decision": decision},
        )
        return record

    if current not in rule["from"]:
        raise InvalidTransitionError(record_type, record_id, current, rule["to"])

    amount = record_amount(record_type, record) if rule["to"] == STATUS_APPROVED else 0.0

    # Compare-and-set: only move the row if nobody decided it since it was read
    model = _MODELS[record_type]
    result = db.session.execute(
        update(model)
        .where(model.id == record.id, model.status == current)
        .values(status=rule["to"], decided_by=actor.id, decided_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.session.rollback()
        latest = record.status
        if latest == _SETTLED[decision] or latest == rule["to"]:
            logger.info(
                "Concurrent decision already settled %s #%s (%s)", record_type, record_id, latest,
                extra={"actor_id": actor.id, "record_type": record_type,
                       "record_id": record_id, "decision": decision},
            )
            return record
        raise InvalidTransitionError(record_type, record_id, latest, rule["to"])

    if amount > 0:
        db.session.add(SpendLedgerEntry(
            record_type=record_type,
            record_id=record.id,
            amount=amount,
            approved_by=actor.id,
        ))

    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning(
            "Ledger already holds %s #%s", record_type, record_id,
            extra={"actor_id": actor.id, "record_type": record_type, "record_id": record_id},
        )
        raise ConflictError(f"{record_type} #{record_id} was already approved") from exc

    logger.info(
        "%s #%s moved %s → %s", record_type, record_id, current, record.status,
        extra={"actor_id": actor.id, "record_type": record_type, "record_id": record_id,
               "decision": decision, "amount": amount},
    )
    return record


def pending_queue(actor) -> dict:
    """Records awaiting the actor's decision.

    Admins see both pending states, managers only ``pending_manager``,
    anyone else nothing.
    """
    if has_permission(actor, "approvals.admin"):
        statuses = [STATUS_PENDING_MANAGER, STATUS_PENDING_ADMIN]
    elif has_permission(actor, "approvals.manager"):
        statuses = [STATUS_PENDING_MANAGER]
    else:
        return {"time_logs": [], "travel_requests": [], "total": 0}

    logs = (
        TimeLog.query.filter(TimeLog.status.in_(statuses))
        .order_by(TimeLog.created_at.asc(), TimeLog.id.asc())
        .all()
    )
    trips = (
        TravelRequest.query.filter(TravelRequest.status.in_(statuses))
        .order_by(TravelRequest.created_at.asc(), TravelRequest.id.asc())
        .all()
    )

    time_logs = []
    for log in logs:
        item = log.to_dict()
        item["amount"] = record_amount(RECORD_TIME_LOG, log)
        time_logs.append(item)
    travel_requests = []
    for trip in trips:
        item = trip.to_dict()
        item["amount"] = record_amount(RECORD_TRAVEL, trip)
        travel_requests.append(item)

    return {
        "time_logs": time_logs,
        "travel_requests": travel_requests,
        "total": len(time_logs) + len(travel_requests),
    }


def running_total() -> float:
    """Accumulated approved spend: the sum of the ledger."""
    total = db.session.query(func.coalesce(func.sum(SpendLedgerEntry.amount), 0.0)).scalar()
    return float(total or 0.0)


def ledger_summary(actor) -> dict:
    """Ledger total plus a reconciliation against currently approved records.

    ``difference`` is non-zero when an employee's rate changed after a log
    with no stored total was approved.
    """
    require_permission(actor, "financials.view")

    total = running_total()
    entries = db.session.query(func.count(SpendLedgerEntry.id)).scalar() or 0

    derived = 0.0
    for log in TimeLog.query.filter_by(status=STATUS_APPROVED).all():
        derived += record_amount(RECORD_TIME_LOG, log)
    for trip in TravelRequest.query.filter_by(status=STATUS_APPROVED).all():
        derived += record_amount(RECORD_TRAVEL, trip)

    return {
        "total_approved_spend": total,
        "entries": entries,
        "derived_from_records": derived,
        "difference": total - derived,
    }
