"""
Login, bearer-token resolution and permission checks.
"""

from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import generate_password_hash

from ramp_portal.models import db as _db
from ramp_portal.services.jwt_service import generate_access_token
from ramp_portal.services.permission_service import has_permission
from ramp_portal.utils.crypto import hash_password, verify_password


class TestPasswords:
    def test_bcrypt_roundtrip(self):
        hashed = hash_password("s3cret-pass")
        assert hashed.startswith("$2b$")
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("other", hashed)

    def test_werkzeug_hash_still_verifies(self):
        assert verify_password("legacy-pass", generate_password_hash("legacy-pass"))

    def test_empty_hash(self):
        assert not verify_password("anything", None)


class TestLogin:
    def test_success(self, client, staff):
        staff.password_hash = hash_password("s3cret-pass")
        _db.session.commit()

        res = client.post("/api/v1/auth/login", json={"email": "E3@Rampportal.org", "password": "s3cret-pass"})
        assert res.status_code == 200
        body = res.get_json()
        assert body["token_type"] == "Bearer"
        assert body["employee"]["id"] == "e3"

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert "timesheets.submit" in me.get_json()["permissions"]

    def test_wrong_password(self, client, staff):
        staff.password_hash = hash_password("s3cret-pass")
        _db.session.commit()
        res = client.post("/api/v1/auth/login", json={"email": "e3@rampportal.org", "password": "nope"})
        assert res.status_code == 401

    def test_no_password_set(self, client, staff):
        res = client.post("/api/v1/auth/login", json={"email": "e3@rampportal.org", "password": "whatever"})
        assert res.status_code == 401

    def test_missing_fields(self, client):
        res = client.post("/api/v1/auth/login", json={"email": "e3@rampportal.org"})
        assert res.status_code == 400


class TestTokenMiddleware:
    def test_health_is_public(self, client):
        assert client.get("/api/v1/health").status_code == 200

    def test_missing_token(self, client):
        res = client.get("/api/v1/auth/me")
        assert res.status_code == 401
        assert res.get_json()["code"] == "ERR_UNAUTHORIZED"

    def test_garbage_token(self, client):
        res = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.token"})
        assert res.status_code == 401

    def test_expired_token(self, app, client, staff):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": staff.email, "role": staff.role, "type": "access",
             "iat": past, "exp": past + timedelta(minutes=5)},
            app.config["JWT_SECRET_KEY"] or app.config["SECRET_KEY"],
            algorithm="HS256",
        )
        res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401
        assert res.get_json()["error"] == "Token expired"

    def test_profile_missing(self, client):
        token = generate_access_token("stranger@rampportal.org", "EMPLOYEE")
        res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 403
        assert res.get_json()["code"] == "ERR_PROFILE_MISSING"

    def test_role_comes_from_profile(self, client, staff):
        # A token claiming ADMIN does not outrank the stored role
        token = generate_access_token(staff.email, "ADMIN")
        res = client.get("/api/v1/exports/cpa", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 403

    def test_request_id_header(self, client):
        res = client.get("/api/v1/health", headers={"X-Request-ID": "abc123"})
        assert res.headers["X-Request-ID"] == "abc123"


class TestRolePermissions:
    def test_matrix(self, staff, manager_lead, admin, master_admin, make_employee):
        partner = make_employee("e9", role="INDUSTRY_PARTNER")
        assert has_permission(partner, "timesheets.submit")
        assert not has_permission(partner, "approvals.view")
        assert has_permission(manager_lead, "approvals.manager")
        assert not has_permission(manager_lead, "approvals.admin")
        assert has_permission(admin, "export.run")
        assert not has_permission(admin, "system.seed")
        assert has_permission(master_admin, "system.seed")
        assert not has_permission(None, "timesheets.submit")
