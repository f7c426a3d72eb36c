"""
Submission of time logs and travel requests, with receipt uploads.
"""

import io
from pathlib import Path

import pytest
from werkzeug.datastructures import FileStorage

from ramp_portal.core.exceptions import PermissionDeniedError, ValidationError
from ramp_portal.models import db as _db
from ramp_portal.models.timesheet import TimeLog, TravelRequest
from ramp_portal.services import storage_service, timesheet_service
from ramp_portal.services.storage_service import FOLDER_EQUIPMENT, ReceiptStorage


def _form(**overrides):
    data = {
        "week_ending": "2025-03-08",
        "actual_hours": "8",
        "journal_entry": "Forklift practical assessment",
    }
    data.update(overrides)
    return data


def _stored_files(app):
    root = Path(app.config["RECEIPT_STORAGE_DIR"])
    return sorted(p for p in root.rglob("*") if p.is_file())


class TestSubmitTimeLog:
    def test_wage_rate_applied(self, staff):
        log = timesheet_service.submit_time_log(staff, _form())
        assert log.hourly_rate == 25.0
        assert log.total_cost == pytest.approx(200.0)
        assert log.billable_hours == 8.0
        assert log.employee_name == "Priya Lee"
        assert log.budget_category == "Personnel"
        assert log.status == "pending_admin"

    def test_budget_rate_when_no_wage(self, make_employee):
        emp = make_employee("e4", planned_program_budget=9000.0, fte_operational_hours=450.0)
        log = timesheet_service.submit_time_log(emp, _form(actual_hours="10"))
        assert log.hourly_rate == pytest.approx(20.0)
        assert log.total_cost == pytest.approx(200.0)

    def test_zero_rate_without_wage_or_hours(self, make_employee):
        emp = make_employee("e4", planned_program_budget=9000.0, fte_operational_hours=0.0)
        log = timesheet_service.submit_time_log(emp, _form())
        assert log.hourly_rate == 0.0
        assert log.total_cost == 0.0

    def test_report_routed_to_manager(self, report):
        log = timesheet_service.submit_time_log(report, _form())
        assert log.status == "pending_manager"

    def test_optional_expenses(self, staff):
        log = timesheet_service.submit_time_log(
            staff, _form(equipment_cost="120.50", supplies_cost="", budget_category="Contractual"),
        )
        assert log.equipment_cost == pytest.approx(120.5)
        assert log.supplies_cost is None
        assert log.budget_category == "Contractual"

    @pytest.mark.parametrize("field,value", [
        ("actual_hours", ""),
        ("actual_hours", "0"),
        ("actual_hours", "-2"),
        ("actual_hours", "eight"),
        ("actual_hours", "nan"),
        ("week_ending", ""),
        ("week_ending", "next friday"),
        ("journal_entry", "   "),
        ("budget_category", "Travel"),
        ("equipment_cost", "-5"),
    ])
    def test_rejects_bad_input(self, staff, field, value):
        with pytest.raises(ValidationError):
            timesheet_service.submit_time_log(staff, _form(**{field: value}))
        assert TimeLog.query.count() == 0

    def test_requires_submit_permission(self, make_employee):
        ghost = make_employee("x1", role="AUDITOR")
        with pytest.raises(PermissionDeniedError):
            timesheet_service.submit_time_log(ghost, _form())


class TestSubmitTravel:
    def test_mileage_plus_lodging(self, staff):
        trip = timesheet_service.submit_travel_request(
            staff, {"week_ending": "2025-03-08", "distance_miles": "100", "lodging_cost": "50"},
        )
        assert trip.total_reimbursement == pytest.approx(117.0)
        assert trip.status == "pending_admin"

    def test_missing_amounts_default_to_zero(self, staff):
        trip = timesheet_service.submit_travel_request(staff, {"week_ending": "2025-03-08"})
        assert trip.distance_miles == 0
        assert trip.total_reimbursement == 0

    def test_configured_mileage_rate(self, app, staff):
        app.config["MILEAGE_RATE"] = 0.70
        try:
            trip = timesheet_service.submit_travel_request(
                staff, {"week_ending": "2025-03-08", "distance_miles": "10"},
            )
        finally:
            app.config["MILEAGE_RATE"] = 0.67
        assert trip.total_reimbursement == pytest.approx(7.0)


class TestSubmissionAPI:
    def test_json_submission(self, client, auth_headers, staff):
        res = client.post("/api/v1/timesheets", json=_form(), headers=auth_headers(staff))
        assert res.status_code == 201
        body = res.get_json()
        assert body["total_cost"] == pytest.approx(200.0)
        assert body["record_type"] == "time_log"

    def test_multipart_with_receipts(self, app, client, auth_headers, staff):
        data = _form(equipment_cost="40", supplies_cost="10")
        data["equipment_receipt"] = (io.BytesIO(b"%PDF-1.4 equipment"), "drill invoice.pdf")
        data["supplies_receipt"] = (io.BytesIO(b"supplies"), "tape.jpg")
        res = client.post(
            "/api/v1/timesheets", data=data,
            headers=auth_headers(staff), content_type="multipart/form-data",
        )
        assert res.status_code == 201
        body = res.get_json()
        assert body["equipment_receipt_url"].startswith("/api/v1/receipts/receipts/equipment/")
        assert body["equipment_receipt_url"].endswith("_drill_invoice.pdf")
        assert body["supplies_receipt_url"].endswith("_tape.jpg")

        res = client.get(body["equipment_receipt_url"], headers=auth_headers(staff))
        assert res.status_code == 200
        assert res.data == b"%PDF-1.4 equipment"

    def test_travel_receipt(self, client, auth_headers, staff):
        res = client.post(
            "/api/v1/travel-requests",
            data={
                "week_ending": "2025-03-08",
                "distance_miles": "12",
                "receipt": (io.BytesIO(b"hotel"), "hotel.png"),
            },
            headers=auth_headers(staff), content_type="multipart/form-data",
        )
        assert res.status_code == 201
        assert "/receipts/travel/" in res.get_json()["attachment_url"]

    def test_receipts_removed_when_submission_fails(self, app, client, auth_headers, staff, monkeypatch):
        before = _stored_files(app)

        def _boom():
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(_db.session, "commit", _boom)
        data = _form(equipment_cost="40")
        data["equipment_receipt"] = (io.BytesIO(b"receipt"), "saw.pdf")
        res = client.post(
            "/api/v1/timesheets", data=data,
            headers=auth_headers(staff), content_type="multipart/form-data",
        )
        monkeypatch.undo()

        assert res.status_code == 500
        assert res.get_json()["error"] == "Internal server error"
        assert _stored_files(app) == before
        assert TimeLog.query.count() == 0

    def test_validation_error_shape(self, client, auth_headers, staff):
        res = client.post(
            "/api/v1/timesheets", json=_form(actual_hours="abc"), headers=auth_headers(staff),
        )
        assert res.status_code == 422
        body = res.get_json()
        assert body["code"] == "ERR_VALIDATION_CONSTRAINT"
        assert "actual_hours" in body["details"]

    def test_extensionless_receipt_rejected(self, client, auth_headers, staff):
        res = client.post(
            "/api/v1/travel-requests",
            data={"week_ending": "2025-03-08", "receipt": (io.BytesIO(b"x"), "receipt")},
            headers=auth_headers(staff), content_type="multipart/form-data",
        )
        assert res.status_code == 422
        assert TravelRequest.query.count() == 0

    def test_my_submissions(self, client, auth_headers, staff, make_employee):
        other = make_employee("e8", wage=20.0)
        for week in ("2025-03-01", "2025-03-08", "2025-03-15"):
            timesheet_service.submit_time_log(staff, _form(week_ending=week))
        timesheet_service.submit_time_log(other, _form())
        timesheet_service.submit_travel_request(staff, {"week_ending": "2025-03-08"})

        res = client.get("/api/v1/me/submissions?limit=2", headers=auth_headers(staff))
        assert res.status_code == 200
        body = res.get_json()
        assert len(body["time_logs"]) == 2
        assert {log["employee_id"] for log in body["time_logs"]} == {"e3"}
        assert len(body["travel_requests"]) == 1

    def test_form_options(self, client, auth_headers, staff):
        res = client.get("/api/v1/timesheets/options", headers=auth_headers(staff))
        body = res.get_json()
        assert body["default_category"] == "Personnel"
        assert "Marketing" in body["labor_categories"]
        assert "Travel" not in body["labor_categories"]
        assert body["mileage_rate"] == 0.67


class TestReceiptStorage:
    def test_same_name_in_same_millisecond(self, tmp_path, monkeypatch):
        monkeypatch.setattr(storage_service.time, "time", lambda: 1741392000.0)
        storage = ReceiptStorage(tmp_path, "/r")

        first = storage.save(FileStorage(io.BytesIO(b"first"), "receipt.pdf"), FOLDER_EQUIPMENT)
        second = storage.save(FileStorage(io.BytesIO(b"second"), "receipt.pdf"), FOLDER_EQUIPMENT)

        assert first != second
        assert storage.open(storage.key_for(first)).read_bytes() == b"first"
        assert storage.open(storage.key_for(second)).read_bytes() == b"second"
