"""
Program Dashboard Service — planned vs. actual spend for the grant program.

Aggregates, for an optional inclusive week-ending range:
  - Headline metrics (planned budget, actual spend, variance, weighted rate)
  - Spend per budget category against the configured caps
  - Spend vs. hourly rate per week
  - Per-employee utilization and resource efficiency
  - Schedule timeline bounds

Everything is recomputed from approved records on every call; nothing here
writes to the database.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta

from flask import current_app
from sqlalchemy import func

from ramp_portal.models import db
from ramp_portal.models.employee import ROLE_INDUSTRY_PARTNER, Employee
from ramp_portal.models.program import Shift
from ramp_portal.models.timesheet import STATUS_APPROVED, TimeLog, TravelRequest
from ramp_portal.services import spend_service
from ramp_portal.services.permission_service import require_permission

logger = logging.getLogger(__name__)

HEALTH_ON_TRACK = "ON_TRACK"
HEALTH_REVIEW = "REVIEW"

# Share of an employee's planned budget available per shift
SHIFT_BUDGET_DIVISOR = 5


def _in_range(query, column, start: date | None, end: date | None):
    if start is not None:
        query = query.filter(column >= start)
    if end is not None:
        query = query.filter(column <= end)
    return query


def approved_time_logs(start=None, end=None) -> list[TimeLog]:
    query = TimeLog.query.filter(TimeLog.status == STATUS_APPROVED)
    return _in_range(query, TimeLog.week_ending, start, end).order_by(TimeLog.id).all()


def approved_travel(start=None, end=None) -> list[TravelRequest]:
    query = TravelRequest.query.filter(TravelRequest.status == STATUS_APPROVED)
    return _in_range(query, TravelRequest.week_ending, start, end).order_by(TravelRequest.id).all()


def planned_budget() -> float:
    """Sum of shift planned budgets plus the external grant."""
    shifts_total = db.session.query(func.coalesce(func.sum(Shift.planned_budget), 0.0)).scalar()
    return float(shifts_total or 0.0) + current_app.config["EXTERNAL_GRANT_AMOUNT"]


def compute_metrics(logs, trips) -> dict:
    planned = planned_budget()
    spend = 0.0
    hours = 0.0
    for log in logs:
        spend += spend_service.time_log_amount(log, log.employee)
        hours += log.actual_hours or 0.0
    for trip in trips:
        spend += spend_service.travel_amount(trip)

    variance = planned - spend
    return {
        "total_planned_budget": planned,
        "external_grant": current_app.config["EXTERNAL_GRANT_AMOUNT"],
        "total_actual_spend": spend,
        "total_actual_hours": hours,
        "variance": variance,
        "weighted_hourly_rate": spend / hours if hours > 0 else 0.0,
        "health": HEALTH_ON_TRACK if variance >= 0 else HEALTH_REVIEW,
        "utilized_pct": spend / (planned or 1.0) * 100,
    }


def category_breakdown(logs, trips) -> list[dict]:
    """Actual spend per budget category against its cap.

    Labor is booked to the log's own category (Personnel when unset);
    equipment, supplies and travel always go to their namesake category.
    Categories missing from BUDGET_CAPS still appear when they carry spend.
    """
    caps = dict(current_app.config["BUDGET_CAPS"])
    grant_category = current_app.config["GRANT_CATEGORY"]
    caps[grant_category] = caps.get(grant_category, 0.0) + current_app.config["EXTERNAL_GRANT_AMOUNT"]

    actuals = defaultdict(float)
    for log in logs:
        actuals[log.budget_category or "Personnel"] += spend_service.time_log_labor(log, log.employee)
        if log.equipment_cost:
            actuals["Equipment"] += log.equipment_cost
        if log.supplies_cost:
            actuals["Supplies"] += log.supplies_cost
    for trip in trips:
        actuals["Travel"] += spend_service.travel_amount(trip)

    names = list(caps) + [name for name in actuals if name not in caps]
    rows = []
    for name in names:
        planned = caps.get(name, 0.0)
        actual = actuals.get(name, 0.0)
        rows.append({
            "category": name,
            "planned": planned,
            "actual": actual,
            "variance": planned - actual,
            "over_budget": actual > planned,
        })
    return rows


def spend_vs_rate(logs) -> list[dict]:
    """Per week: approved time-log spend, hours and the implied hourly rate."""
    weeks = {}
    for log in logs:
        bucket = weeks.setdefault(log.week_ending, {"spend": 0.0, "hours": 0.0})
        bucket["spend"] += spend_service.time_log_amount(log, log.employee)
        bucket["hours"] += log.actual_hours or 0.0

    return [
        {
            "week_ending": week.isoformat(),
            "spend": b["spend"],
            "hours": b["hours"],
            "rate": b["spend"] / b["hours"] if b["hours"] > 0 else 0.0,
        }
        for week, b in sorted(weeks.items())
    ]


def utilization(logs, employees) -> list[dict]:
    hours_by_employee = defaultdict(float)
    for log in logs:
        hours_by_employee[log.employee_id] += log.actual_hours or 0.0

    rows = []
    for emp in employees:
        actual = hours_by_employee.get(emp.id, 0.0)
        goal = emp.fte_operational_hours or 1.0
        rows.append({
            "employee_id": emp.id,
            "name": emp.full_name,
            "role": emp.role,
            "approved_hours": actual,
            "goal_hours": goal,
            "utilization_pct": actual / goal * 100,
        })
    return rows


def resource_efficiency(logs, employees) -> list[dict]:
    cost_by_employee = defaultdict(float)
    for log in logs:
        cost_by_employee[log.employee_id] += spend_service.time_log_amount(log, log.employee)

    rows = []
    for emp in employees:
        actual = cost_by_employee.get(emp.id, 0.0)
        limit = (emp.planned_program_budget or 0.0) / SHIFT_BUDGET_DIVISOR
        rows.append({
            "employee_id": emp.id,
            "name": emp.full_name,
            "actual_spend": actual,
            "shift_limit": limit,
            "variance": limit - actual,
            "funding": "CONTRACT" if emp.role == ROLE_INDUSTRY_PARTNER else "GRANT",
        })
    return rows


def timeline() -> dict:
    """Shifts with their modules, plus the planned-date bounds for a Gantt view."""
    shifts = Shift.query.order_by(Shift.planned_start, Shift.id).all()
    starts = [s.planned_start for s in shifts if s.planned_start]
    ends = [s.planned_end for s in shifts if s.planned_end]
    if starts and ends:
        lower, upper = min(starts), max(ends)
    else:
        lower = date.today()
        upper = lower + timedelta(days=1)
    duration = (upper - lower).days or 1
    return {
        "start": lower.isoformat(),
        "end": upper.isoformat(),
        "duration_days": duration,
        "shifts": [s.to_dict() for s in shifts],
    }


def get_dashboard(actor, start: date | None = None, end: date | None = None) -> dict:
    """Full dashboard payload for the given week-ending range."""
    require_permission(actor, "dashboard.view")
    logs = approved_time_logs(start, end)
    trips = approved_travel(start, end)
    employees = Employee.query.order_by(Employee.last_name, Employee.first_name).all()

    logger.debug("Dashboard computed over %d logs / %d trips", len(logs), len(trips),
                 extra={"actor_id": actor.id})
    return {
        "range": {
            "start": start.isoformat() if start else None,
            "end": end.isoformat() if end else None,
        },
        "metrics": compute_metrics(logs, trips),
        "categories": category_breakdown(logs, trips),
        "spend_vs_rate": spend_vs_rate(logs),
        "utilization": utilization(logs, employees),
        "resource_efficiency": resource_efficiency(logs, employees),
        "timeline": timeline(),
    }
