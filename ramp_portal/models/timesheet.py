"""
Time logs and travel requests — the two approvable record kinds.

Both share the same lifecycle: created by an employee submission, then moved
exactly once along the approval state machine (see approval_service).
Cost fields are stored unrounded; rounding to cents is a display concern.
"""

from datetime import datetime, timezone

from ramp_portal.models import db

# ── Workflow status ───────────────────────────────────────────────────────────

STATUS_PENDING_MANAGER = "pending_manager"
STATUS_PENDING_ADMIN = "pending_admin"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

PENDING_STATUSES = frozenset({STATUS_PENDING_MANAGER, STATUS_PENDING_ADMIN})
TERMINAL_STATUSES = frozenset({STATUS_APPROVED, STATUS_REJECTED})

# ── Record kinds ──────────────────────────────────────────────────────────────

RECORD_TIME_LOG = "time_log"
RECORD_TRAVEL = "travel_request"

RECORD_TYPES = frozenset({RECORD_TIME_LOG, RECORD_TRAVEL})

# ── Budget categories ─────────────────────────────────────────────────────────

BUDGET_CATEGORIES = (
    "Personnel",
    "Fringe",
    "Travel",
    "Equipment",
    "Supplies",
    "Contractual",
    "Other",
    "Marketing",
)

# Categories an employee may book labor against on the time form
LABOR_CATEGORIES = frozenset({"Personnel", "Contractual", "Fringe", "Marketing", "Other"})

DEFAULT_LABOR_CATEGORY = "Personnel"


def _iso(value):
    return value.isoformat() if value else None


class TimeLog(db.Model):
    """Weekly hours submission plus optional equipment/supplies expenses."""

    __tablename__ = "time_logs"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(
        db.String(200),
        db.ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    employee_name = db.Column(db.String(200), comment="Name snapshot at submission time")
    week_ending = db.Column(db.Date, nullable=False, index=True)

    actual_hours = db.Column(db.Float, nullable=False, default=0.0)
    billable_hours = db.Column(db.Float, nullable=False, default=0.0)
    hourly_rate = db.Column(db.Float, nullable=False, default=0.0)
    total_cost = db.Column(db.Float, nullable=True, comment="Labor only; expenses are separate")
    budget_category = db.Column(db.String(30), nullable=False, default=DEFAULT_LABOR_CATEGORY)
    journal_entry = db.Column(db.Text, nullable=False, default="")

    equipment_cost = db.Column(db.Float, nullable=True)
    equipment_receipt_url = db.Column(db.String(500), nullable=True)
    supplies_cost = db.Column(db.Float, nullable=True)
    supplies_receipt_url = db.Column(db.String(500), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING_ADMIN, index=True)
    decided_by = db.Column(db.String(200), nullable=True)
    decided_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    employee = db.relationship("Employee", lazy="joined")

    @property
    def receipt_urls(self) -> list[str]:
        return [u for u in (self.equipment_receipt_url, self.supplies_receipt_url) if u]

    def to_dict(self):
        return {
            "id": self.id,
            "record_type": RECORD_TIME_LOG,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "week_ending": _iso(self.week_ending),
            "actual_hours": self.actual_hours,
            "billable_hours": self.billable_hours,
            "hourly_rate": self.hourly_rate,
            "total_cost": self.total_cost,
            "budget_category": self.budget_category,
            "journal_entry": self.journal_entry,
            "equipment_cost": self.equipment_cost,
            "equipment_receipt_url": self.equipment_receipt_url,
            "supplies_cost": self.supplies_cost,
            "supplies_receipt_url": self.supplies_receipt_url,
            "status": self.status,
            "decided_by": self.decided_by,
            "decided_at": _iso(self.decided_at),
            "created_at": _iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<TimeLog #{self.id} {self.employee_id} {self.week_ending} {self.status}>"


class TravelRequest(db.Model):
    """Mileage + lodging reimbursement request."""

    __tablename__ = "travel_requests"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(
        db.String(200),
        db.ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    week_ending = db.Column(db.Date, nullable=False, index=True)
    distance_miles = db.Column(db.Float, nullable=False, default=0.0)
    lodging_cost = db.Column(db.Float, nullable=False, default=0.0)
    total_reimbursement = db.Column(db.Float, nullable=True)
    attachment_url = db.Column(db.String(500), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING_ADMIN, index=True)
    decided_by = db.Column(db.String(200), nullable=True)
    decided_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    employee = db.relationship("Employee", lazy="joined")

    @property
    def receipt_urls(self) -> list[str]:
        return [self.attachment_url] if self.attachment_url else []

    def to_dict(self):
        return {
            "id": self.id,
            "record_type": RECORD_TRAVEL,
            "employee_id": self.employee_id,
            "employee_name": self.employee.full_name if self.employee else None,
            "week_ending": _iso(self.week_ending),
            "distance_miles": self.distance_miles,
            "lodging_cost": self.lodging_cost,
            "total_reimbursement": self.total_reimbursement,
            "attachment_url": self.attachment_url,
            "status": self.status,
            "decided_by": self.decided_by,
            "decided_at": _iso(self.decided_at),
            "created_at": _iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<TravelRequest #{self.id} {self.employee_id} {self.week_ending} {self.status}>"
