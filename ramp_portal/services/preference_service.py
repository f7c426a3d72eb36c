"""
Per-employee preferences: UI theme and the welcome banner.

The banner is shown to allow-listed employees (everyone when
WELCOME_BANNER_EMAILS is empty) at most once per
WELCOME_BANNER_INTERVAL_HOURS; the time it was last shown is stored on the
employee's preference row.
"""

import logging
import random
from datetime import datetime, timedelta, timezone

from flask import current_app

from ramp_portal.core.exceptions import ValidationError
from ramp_portal.models import db
from ramp_portal.models.settings import THEMES, UserPreference

logger = logging.getLogger(__name__)


def _get_or_create(employee) -> UserPreference:
    pref = db.session.get(UserPreference, employee.id)
    if pref is None:
        pref = UserPreference(employee_id=employee.id, theme="light")
        db.session.add(pref)
    return pref


def get_preferences(employee) -> dict:
    pref = db.session.get(UserPreference, employee.id)
    if pref is None:
        return {"employee_id": employee.id, "theme": "light", "welcome_seen_at": None}
    return pref.to_dict()


def update_preferences(employee, data: dict) -> dict:
    theme = data.get("theme")
    if theme not in THEMES:
        raise ValidationError(
            f"Invalid theme '{theme}'",
            details={"theme": f"must be one of {sorted(THEMES)}"},
        )
    pref = _get_or_create(employee)
    pref.theme = theme
    db.session.commit()
    return pref.to_dict()


def _as_utc(value):
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def welcome_banner(employee, now=None) -> dict:
    """Decide whether to show the welcome banner and record it when shown."""
    allowed = [e.lower() for e in current_app.config.get("WELCOME_BANNER_EMAILS") or []]
    if allowed and employee.email.lower() not in allowed:
        return {"show": False, "message": None}

    now = now or datetime.now(timezone.utc)
    interval = timedelta(hours=current_app.config["WELCOME_BANNER_INTERVAL_HOURS"])
    pref = _get_or_create(employee)
    last_seen = _as_utc(pref.welcome_seen_at)
    if last_seen is not None and now - last_seen <= interval:
        return {"show": False, "message": None}

    messages = current_app.config.get("WELCOME_MESSAGES") or []
    pref.welcome_seen_at = now
    db.session.commit()

    logger.debug("Welcome banner shown", extra={"employee_id": employee.id})
    return {
        "show": True,
        "name": employee.first_name,
        "message": random.choice(messages) if messages else None,
    }
