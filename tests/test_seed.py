"""
Initial data load and the operator CLI commands.
"""

import pytest

from ramp_portal.core.exceptions import PermissionDeniedError
from ramp_portal.models import db as _db
from ramp_portal.models.employee import Employee
from ramp_portal.models.program import Cohort, Shift, ShiftModule
from ramp_portal.models.settings import TooltipConfig
from ramp_portal.services import seed_service
from ramp_portal.services.employee_service import authenticate


class TestSeedDatabase:
    def test_loads_everything(self):
        counts = seed_service.seed_database()
        assert counts["employees"] == 9
        assert Employee.query.count() == 9
        assert Shift.query.count() == 4
        assert ShiftModule.query.count() == 9
        assert Cohort.query.count() == 3
        assert TooltipConfig.query.count() == counts["tooltips"]
        assert _db.session.get(Employee, "e7").manager_id == "e6"

    def test_rerun_updates_in_place(self):
        seed_service.seed_database()
        lead = _db.session.get(Employee, "e3")
        lead.wage = 99.0
        lead.password_hash = "kept"
        _db.session.commit()

        seed_service.seed_database()
        lead = _db.session.get(Employee, "e3")
        assert lead.wage == 32.5
        assert lead.password_hash == "kept"
        assert Employee.query.count() == 9
        assert ShiftModule.query.count() == 9

    def test_bootstrap_admins(self, app):
        app.config["BOOTSTRAP_ADMIN_EMAILS"] = ["Coordinator@ramp.example.org", "founder@rampportal.org"]
        try:
            counts = seed_service.seed_database()
        finally:
            app.config["BOOTSTRAP_ADMIN_EMAILS"] = []
        assert counts["bootstrap_admins"] == 2
        assert _db.session.get(Employee, "e5").role == "MASTER_ADMIN"
        founder = Employee.query.filter_by(email="founder@rampportal.org").one()
        assert founder.role == "MASTER_ADMIN"

    def test_requires_master_admin(self, admin):
        with pytest.raises(PermissionDeniedError):
            seed_service.seed_database(admin)


class TestSeedAPI:
    def test_master_admin_can_seed(self, client, auth_headers, master_admin):
        res = client.post("/api/v1/admin/seed", headers=auth_headers(master_admin))
        assert res.status_code == 200
        assert res.get_json()["seeded"]["shifts"] == 4

    def test_admin_forbidden(self, client, auth_headers, admin):
        res = client.post("/api/v1/admin/seed", headers=auth_headers(admin))
        assert res.status_code == 403


class TestCLI:
    def test_seed_db(self, app):
        result = app.test_cli_runner().invoke(args=["seed-db"])
        assert result.exit_code == 0
        assert "Seeded" in result.output
        assert Employee.query.count() == 9

    def test_set_password(self, app, staff):
        result = app.test_cli_runner().invoke(
            args=["set-password", staff.email, "--password", "long-enough-1"],
        )
        assert result.exit_code == 0, result.output
        assert authenticate(staff.email, "long-enough-1") is not None
