"""
Spend accounting — the amount rules shared by submission, approval,
export and the dashboard.

Pure functions over model instances (or anything with the same attributes);
nothing here touches the session. Amounts are unrounded floats.

Two rates exist and are deliberately different:

    budget_rate     used when a time log is submitted; an employee with no
                    wage and no FTE hours gets 0.
    fallback_rate   used when an approved log has no stored total; an
                    employee with no FTE hours divides by 1.
"""


def budget_rate(employee) -> float:
    """Submission-time hourly rate for ``employee``."""
    if employee is None:
        return 0.0
    wage = employee.wage or 0.0
    if wage > 0:
        return float(wage)
    budget = employee.planned_program_budget
    hours = employee.fte_operational_hours
    if budget and hours:
        return budget / hours
    return 0.0


def fallback_rate(employee) -> float:
    """Approval-time hourly rate for a log whose ``total_cost`` is empty."""
    if employee is None:
        return 0.0
    wage = employee.wage or 0.0
    if wage > 0:
        return float(wage)
    return (employee.planned_program_budget or 0.0) / (employee.fte_operational_hours or 1.0)


def time_log_labor(log, employee) -> float:
    """Labor part of a time log: stored total, else hours at the fallback rate."""
    if log.total_cost:
        return float(log.total_cost)
    if employee is None:
        return 0.0
    return (log.actual_hours or 0.0) * fallback_rate(employee)


def time_log_amount(log, employee) -> float:
    """Labor plus equipment plus supplies. Expenses count even with zero labor."""
    return (
        time_log_labor(log, employee)
        + (log.equipment_cost or 0.0)
        + (log.supplies_cost or 0.0)
    )


def travel_total(miles: float, lodging: float, rate: float) -> float:
    return (miles or 0.0) * rate + (lodging or 0.0)


def travel_amount(request) -> float:
    return float(request.total_reimbursement or 0.0)
