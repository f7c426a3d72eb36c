"""
Employee model — program staff, managers, admins and industry partners.

The email is the join key against the authenticated identity. Rows are
created by the admin staff screen or the bulk seed and are edited in
place; the API never deletes them.
"""

from datetime import datetime, timezone

from ramp_portal.models import db

# ── Roles ─────────────────────────────────────────────────────────────────────

ROLE_EMPLOYEE = "EMPLOYEE"
ROLE_MANAGER = "MANAGER"
ROLE_ADMIN = "ADMIN"
ROLE_MASTER_ADMIN = "MASTER_ADMIN"
ROLE_INDUSTRY_PARTNER = "INDUSTRY_PARTNER"

VALID_ROLES = frozenset({
    ROLE_EMPLOYEE,
    ROLE_MANAGER,
    ROLE_ADMIN,
    ROLE_MASTER_ADMIN,
    ROLE_INDUSTRY_PARTNER,
})

ADMIN_ROLES = frozenset({ROLE_ADMIN, ROLE_MASTER_ADMIN})


class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.String(200), primary_key=True)
    email = db.Column(db.String(200), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False, default="")
    role = db.Column(db.String(30), nullable=False, default=ROLE_EMPLOYEE)

    # Hourly wage; 0 means "derive the rate from budget / FTE hours"
    wage = db.Column(db.Float, nullable=False, default=0.0)
    planned_program_budget = db.Column(db.Float, nullable=True)
    fte_operational_hours = db.Column(db.Float, nullable=True)

    company_name = db.Column(db.String(200), nullable=True, comment="Industry partners only")
    manager_id = db.Column(
        db.String(200),
        db.ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
    )
    password_hash = db.Column(db.String(256), nullable=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "role": self.role,
            "wage": self.wage,
            "planned_program_budget": self.planned_program_budget,
            "fte_operational_hours": self.fte_operational_hours,
            "company_name": self.company_name,
            "manager_id": self.manager_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Employee {self.id} {self.email} {self.role}>"
