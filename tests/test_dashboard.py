"""
Program dashboard: metrics, category caps, weekly rate, utilization,
efficiency and the schedule timeline.
"""

from datetime import date

import pytest

from ramp_portal.core.exceptions import PermissionDeniedError
from ramp_portal.models import db as _db
from ramp_portal.models.program import Shift
from ramp_portal.models.timesheet import TimeLog, TravelRequest
from ramp_portal.services import dashboard_service


def _log(employee, week, hours, total_cost=None, status="approved", **fields):
    fields.setdefault("budget_category", "Personnel")
    log = TimeLog(
        employee_id=employee.id,
        employee_name=employee.full_name,
        week_ending=week,
        actual_hours=hours,
        billable_hours=hours,
        hourly_rate=employee.wage,
        total_cost=total_cost,
        journal_entry="work",
        status=status,
        **fields,
    )
    _db.session.add(log)
    _db.session.commit()
    return log


def _trip(employee, week, total, status="approved"):
    trip = TravelRequest(
        employee_id=employee.id, week_ending=week,
        distance_miles=0.0, lodging_cost=total, total_reimbursement=total, status=status,
    )
    _db.session.add(trip)
    _db.session.commit()
    return trip


def _shift(name, start, end, budget):
    shift = Shift(name=name, planned_start=start, planned_end=end, planned_budget=budget)
    _db.session.add(shift)
    _db.session.commit()
    return shift


@pytest.fixture()
def program(staff, manager_lead):
    _shift("Shift 1", date(2025, 1, 6), date(2025, 3, 28), 5000.0)
    _shift("Shift 2", date(2025, 4, 1), date(2025, 6, 30), 3000.0)
    _log(staff, date(2025, 3, 8), 4.0, total_cost=100.0, equipment_cost=20.0)
    _log(staff, date(2025, 4, 5), 2.0, budget_category="Contractual")
    _log(staff, date(2025, 3, 8), 9.0, total_cost=225.0, status="pending_admin")
    _trip(staff, date(2025, 3, 8), 30.0)
    _trip(staff, date(2025, 4, 5), 999.0, status="rejected")


def _category(rows, name):
    return next(row for row in rows if row["category"] == name)


class TestMetrics:
    def test_full_range(self, program):
        logs = dashboard_service.approved_time_logs()
        trips = dashboard_service.approved_travel()
        metrics = dashboard_service.compute_metrics(logs, trips)
        assert metrics["total_planned_budget"] == pytest.approx(18000.0)
        assert metrics["total_actual_spend"] == pytest.approx(200.0)
        assert metrics["total_actual_hours"] == pytest.approx(6.0)
        assert metrics["variance"] == pytest.approx(17800.0)
        assert metrics["weighted_hourly_rate"] == pytest.approx(200.0 / 6.0)
        assert metrics["health"] == "ON_TRACK"

    def test_range_is_inclusive(self, program):
        end = date(2025, 3, 8)
        logs = dashboard_service.approved_time_logs(None, end)
        trips = dashboard_service.approved_travel(None, end)
        metrics = dashboard_service.compute_metrics(logs, trips)
        assert metrics["total_actual_spend"] == pytest.approx(150.0)
        assert metrics["total_actual_hours"] == pytest.approx(4.0)

    def test_overspend_needs_review(self, staff):
        _log(staff, date(2025, 3, 8), 10.0, total_cost=25000.0)
        metrics = dashboard_service.compute_metrics(dashboard_service.approved_time_logs(), [])
        assert metrics["variance"] == pytest.approx(-15000.0)
        assert metrics["health"] == "REVIEW"

    def test_no_hours_no_rate(self):
        metrics = dashboard_service.compute_metrics([], [])
        assert metrics["weighted_hourly_rate"] == 0.0
        assert metrics["total_planned_budget"] == pytest.approx(10000.0)


class TestCategories:
    def test_actuals_per_category(self, program):
        rows = dashboard_service.category_breakdown(
            dashboard_service.approved_time_logs(), dashboard_service.approved_travel(),
        )
        assert _category(rows, "Personnel")["actual"] == pytest.approx(100.0)
        assert _category(rows, "Contractual")["actual"] == pytest.approx(50.0)
        assert _category(rows, "Equipment")["actual"] == pytest.approx(20.0)
        assert _category(rows, "Travel")["actual"] == pytest.approx(30.0)

    def test_grant_added_to_supplies_cap(self):
        rows = dashboard_service.category_breakdown([], [])
        assert _category(rows, "Supplies")["planned"] == pytest.approx(14500.0)

    def test_marketing_over_zero_cap(self, staff):
        _log(staff, date(2025, 3, 8), 1.0, total_cost=40.0, budget_category="Marketing")
        rows = dashboard_service.category_breakdown(dashboard_service.approved_time_logs(), [])
        marketing = _category(rows, "Marketing")
        assert marketing["planned"] == 0.0
        assert marketing["over_budget"] is True

    def test_uncapped_category_still_listed(self, staff):
        _log(staff, date(2025, 3, 8), 1.0, total_cost=15.0, budget_category="Legacy")
        rows = dashboard_service.category_breakdown(dashboard_service.approved_time_logs(), [])
        legacy = _category(rows, "Legacy")
        assert legacy["planned"] == 0.0
        assert legacy["actual"] == pytest.approx(15.0)


class TestBreakdowns:
    def test_spend_vs_rate_by_week(self, program):
        weeks = dashboard_service.spend_vs_rate(dashboard_service.approved_time_logs())
        assert [w["week_ending"] for w in weeks] == ["2025-03-08", "2025-04-05"]
        assert weeks[0]["spend"] == pytest.approx(120.0)
        assert weeks[0]["rate"] == pytest.approx(30.0)
        assert weeks[1]["rate"] == pytest.approx(25.0)

    def test_utilization(self, program, staff, manager_lead):
        rows = dashboard_service.utilization(
            dashboard_service.approved_time_logs(), [staff, manager_lead],
        )
        by_id = {row["employee_id"]: row for row in rows}
        assert by_id["e3"]["approved_hours"] == pytest.approx(6.0)
        assert by_id["e3"]["goal_hours"] == 1.0
        assert by_id["e6"]["utilization_pct"] == 0.0

    def test_resource_efficiency(self, program, staff, manager_lead, make_employee):
        partner = make_employee("e9", role="INDUSTRY_PARTNER", planned_program_budget=2500.0)
        rows = dashboard_service.resource_efficiency(
            dashboard_service.approved_time_logs(), [staff, manager_lead, partner],
        )
        by_id = {row["employee_id"]: row for row in rows}
        assert by_id["e3"]["actual_spend"] == pytest.approx(170.0)
        assert by_id["e6"]["shift_limit"] == pytest.approx(2000.0)
        assert by_id["e6"]["funding"] == "GRANT"
        assert by_id["e9"]["shift_limit"] == pytest.approx(500.0)
        assert by_id["e9"]["funding"] == "CONTRACT"


class TestTimeline:
    def test_bounds_from_shifts(self, program):
        result = dashboard_service.timeline()
        assert result["start"] == "2025-01-06"
        assert result["end"] == "2025-06-30"
        assert result["duration_days"] == (date(2025, 6, 30) - date(2025, 1, 6)).days
        assert [s["name"] for s in result["shifts"]] == ["Shift 1", "Shift 2"]

    def test_empty_schedule(self):
        result = dashboard_service.timeline()
        assert result["shifts"] == []
        assert result["duration_days"] == 1


class TestDashboardAPI:
    def test_requires_permission(self, staff):
        with pytest.raises(PermissionDeniedError):
            dashboard_service.get_dashboard(staff)

    def test_get_dashboard(self, client, auth_headers, admin, program):
        res = client.get(
            "/api/v1/dashboard?start=2025-04-01&end=2025-04-30", headers=auth_headers(admin),
        )
        assert res.status_code == 200
        body = res.get_json()
        assert body["range"] == {"start": "2025-04-01", "end": "2025-04-30"}
        assert body["metrics"]["total_actual_spend"] == pytest.approx(50.0)
        assert len(body["timeline"]["shifts"]) == 2

    @pytest.mark.parametrize("query", ["start=soon", "start=2025-05-01&end=2025-04-01"])
    def test_bad_range(self, client, auth_headers, admin, query):
        res = client.get(f"/api/v1/dashboard?{query}", headers=auth_headers(admin))
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_VALIDATION_INVALID"

    def test_employee_forbidden(self, client, auth_headers, staff):
        res = client.get("/api/v1/dashboard", headers=auth_headers(staff))
        assert res.status_code == 403
