"""
Program schedule — shifts (milestones / cohort periods) and their modules,
plus the seeded cohort groupings.
"""

from datetime import datetime, timezone

from ramp_portal.models import db


def _iso(value):
    return value.isoformat() if value else None


class Shift(db.Model):
    __tablename__ = "shifts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    planned_start = db.Column(db.Date, nullable=True)
    planned_end = db.Column(db.Date, nullable=True)
    actual_start = db.Column(db.Date, nullable=True)
    actual_end = db.Column(db.Date, nullable=True)
    planned_budget = db.Column(db.Float, nullable=False, default=0.0)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    modules = db.relationship(
        "ShiftModule",
        back_populates="shift",
        order_by="ShiftModule.position",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "planned_start": _iso(self.planned_start),
            "planned_end": _iso(self.planned_end),
            "actual_start": _iso(self.actual_start),
            "actual_end": _iso(self.actual_end),
            "planned_budget": self.planned_budget,
            "modules": [m.to_dict() for m in self.modules],
        }

    def __repr__(self) -> str:
        return f"<Shift #{self.id} {self.name}>"


class ShiftModule(db.Model):
    """Named sub-period of a shift; ``position`` keeps the admin's ordering."""

    __tablename__ = "shift_modules"

    id = db.Column(db.Integer, primary_key=True)
    shift_id = db.Column(
        db.Integer,
        db.ForeignKey("shifts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = db.Column(db.Integer, nullable=False, default=0)
    name = db.Column(db.String(200), nullable=False, default="")
    planned_start = db.Column(db.Date, nullable=True)
    planned_end = db.Column(db.Date, nullable=True)

    shift = db.relationship("Shift", back_populates="modules")

    def to_dict(self):
        return {
            "id": self.id,
            "position": self.position,
            "name": self.name,
            "planned_start": _iso(self.planned_start),
            "planned_end": _iso(self.planned_end),
        }


class Cohort(db.Model):
    __tablename__ = "cohorts"

    id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "description": self.description}
