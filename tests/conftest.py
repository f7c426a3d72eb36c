"""
Shared pytest fixtures for the RAMP Portal test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - make_employee: factory for Employee rows
    - auth_headers: bearer headers for an employee
    - admin / master_admin / manager_lead / staff / report: ready-made staff
"""

import pytest

from ramp_portal import create_app
from ramp_portal.models import db as _db
from ramp_portal.models.employee import Employee
from ramp_portal.services.jwt_service import generate_access_token


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    """Create the Flask application once per test session."""
    application = create_app("testing")
    application.config["RECEIPT_STORAGE_DIR"] = str(tmp_path_factory.mktemp("receipts"))
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def make_employee():
    """Factory: make_employee("e3", role="EMPLOYEE", wage=25) → Employee."""

    def _make(emp_id, role="EMPLOYEE", **fields):
        fields.setdefault("email", f"{emp_id}@rampportal.org")
        fields.setdefault("first_name", emp_id.upper())
        fields.setdefault("last_name", "Tester")
        fields.setdefault("wage", 0.0)
        employee = Employee(id=emp_id, role=role, **fields)
        _db.session.add(employee)
        _db.session.commit()
        return employee

    return _make


@pytest.fixture()
def auth_headers():
    """Return Authorization headers carrying a token for ``employee``."""

    def _headers(employee):
        token = generate_access_token(employee.email, employee.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def admin(make_employee):
    return make_employee("e2", role="ADMIN", first_name="Marcus", last_name="Bell")


@pytest.fixture()
def master_admin(make_employee):
    return make_employee("e1", role="MASTER_ADMIN", first_name="Dana", last_name="Whitfield")


@pytest.fixture()
def manager_lead(make_employee):
    """The configured manager-review lead (MANAGER_REVIEW_LEADS = ["e6"])."""
    return make_employee(
        "e6", role="MANAGER", first_name="Corey", last_name="James",
        planned_program_budget=10000.0, fte_operational_hours=500.0,
    )


@pytest.fixture()
def staff(make_employee):
    """An employee outside the manager-review path, paid 25/hr."""
    return make_employee("e3", first_name="Priya", last_name="Lee", wage=25.0)


@pytest.fixture()
def report(make_employee, manager_lead):
    """An employee reporting to the manager lead."""
    return make_employee("e7", first_name="Tobi", last_name="Ade", wage=20.0, manager_id="e6")
