"""
App-wide help text and per-employee preferences.
"""

from datetime import datetime, timezone

from ramp_portal.models import db


class TooltipConfig(db.Model):
    __tablename__ = "tooltip_configs"

    key = db.Column(db.String(100), primary_key=True)
    text = db.Column(db.Text, nullable=False, default="")
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


THEMES = frozenset({"light", "dark"})


class UserPreference(db.Model):
    """Theme choice and welcome-banner bookkeeping for one employee."""

    __tablename__ = "user_preferences"

    employee_id = db.Column(
        db.String(200),
        db.ForeignKey("employees.id", ondelete="CASCADE"),
        primary_key=True,
    )
    theme = db.Column(db.String(10), nullable=False, default="light")
    welcome_seen_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            "employee_id": self.employee_id,
            "theme": self.theme,
            "welcome_seen_at": self.welcome_seen_at.isoformat() if self.welcome_seen_at else None,
        }
