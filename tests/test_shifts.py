"""
Program schedule: shifts with ordered modules, and cohorts.
"""

import pytest

from ramp_portal.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from ramp_portal.models import db as _db
from ramp_portal.models.program import Cohort, ShiftModule
from ramp_portal.services import shift_service


def _payload(**overrides):
    data = {
        "name": "Shift 1",
        "planned_start": "2025-01-06",
        "planned_end": "2025-03-28",
        "planned_budget": 5000,
        "modules": [
            {"name": "Orientation", "planned_start": "2025-01-06", "planned_end": "2025-01-17"},
            {"name": "Fundamentals", "planned_start": "2025-01-20", "planned_end": "2025-02-28"},
        ],
    }
    data.update(overrides)
    return data


class TestShiftService:
    def test_create_with_modules(self, admin):
        shift = shift_service.create_shift(admin, _payload())
        assert shift.planned_budget == 5000.0
        assert [m.name for m in shift.modules] == ["Orientation", "Fundamentals"]
        assert [m.position for m in shift.modules] == [0, 1]

    def test_update_replaces_modules(self, admin):
        shift = shift_service.create_shift(admin, _payload())
        shift_service.update_shift(admin, shift.id, {
            "modules": [{"name": "Capstone"}, {"name": "Orientation"}],
        })
        assert [m.name for m in shift.modules] == ["Capstone", "Orientation"]
        assert ShiftModule.query.count() == 2

    def test_partial_update_keeps_other_fields(self, admin):
        shift = shift_service.create_shift(admin, _payload())
        shift_service.update_shift(admin, shift.id, {"actual_start": "2025-01-08"})
        assert shift.name == "Shift 1"
        assert shift.actual_start.isoformat() == "2025-01-08"
        assert len(shift.modules) == 2

    @pytest.mark.parametrize("overrides", [
        {"name": " "},
        {"planned_end": "2024-12-31"},
        {"planned_budget": "-1"},
        {"planned_start": "someday"},
        {"modules": "Orientation"},
        {"modules": [{"name": "A", "planned_start": "2025-02-01", "planned_end": "2025-01-01"}]},
    ])
    def test_rejects_bad_input(self, admin, overrides):
        with pytest.raises(ValidationError):
            shift_service.create_shift(admin, _payload(**overrides))

    def test_delete_cascades_modules(self, admin):
        shift_id = shift_service.create_shift(admin, _payload()).id
        shift_service.delete_shift(admin, shift_id)
        assert ShiftModule.query.count() == 0
        with pytest.raises(NotFoundError):
            shift_service.delete_shift(admin, shift_id)

    def test_manager_reads_only(self, admin, manager_lead):
        shift_service.create_shift(admin, _payload())
        assert len(shift_service.list_shifts(manager_lead)) == 1
        with pytest.raises(PermissionDeniedError):
            shift_service.create_shift(manager_lead, _payload())

    def test_list_ordered_by_start(self, admin):
        shift_service.create_shift(admin, _payload(name="Later", planned_start="2025-04-01",
                                                   planned_end="2025-06-30", modules=[]))
        shift_service.create_shift(admin, _payload(name="Earlier"))
        assert [s.name for s in shift_service.list_shifts(admin)] == ["Earlier", "Later"]


class TestShiftAPI:
    def test_crud(self, client, auth_headers, admin):
        headers = auth_headers(admin)
        res = client.post("/api/v1/shifts", json=_payload(), headers=headers)
        assert res.status_code == 201
        shift_id = res.get_json()["id"]
        assert len(res.get_json()["modules"]) == 2

        res = client.put(f"/api/v1/shifts/{shift_id}", json={"planned_budget": 6000}, headers=headers)
        assert res.status_code == 200
        assert res.get_json()["planned_budget"] == 6000.0

        res = client.get("/api/v1/shifts", headers=headers)
        assert res.get_json()["total"] == 1

        assert client.delete(f"/api/v1/shifts/{shift_id}", headers=headers).status_code == 204
        assert client.delete(f"/api/v1/shifts/{shift_id}", headers=headers).status_code == 404

    def test_employee_cannot_view(self, client, auth_headers, staff):
        assert client.get("/api/v1/shifts", headers=auth_headers(staff)).status_code == 403

    def test_cohorts(self, client, auth_headers, staff):
        _db.session.add(Cohort(id="c1", name="Cohort A"))
        _db.session.commit()
        res = client.get("/api/v1/cohorts", headers=auth_headers(staff))
        assert res.status_code == 200
        assert res.get_json()["items"][0]["name"] == "Cohort A"
