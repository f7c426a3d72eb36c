"""
RAMP Portal
Configuration classes for the Flask App Factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name])
    load_program_settings(app)

Program constants (budget caps, grant amount, mileage rate, manager-review
leads) live here rather than in service code. Any of them can be overridden
by a JSON file named in PROGRAM_CONFIG_FILE.
"""

import json
import logging
import os
import secrets

logger = logging.getLogger(__name__)

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

# Default SQLite path for local dev when PostgreSQL is not running
_SQLITE_DEV = f"sqlite:///{os.path.join(basedir, 'instance', 'ramp_portal_dev.db')}"
_SQLITE_TEST = "sqlite:///:memory:"

# Generate a random key for development; production MUST use a stable env var
_DEV_SECRET = secrets.token_hex(32)


def _env_list(name, default=""):
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    DEBUG = False
    TESTING = False

    # SQLAlchemy
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,   # recycle connections every 5 min
    }

    # JWT
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ACCESS_EXPIRES = int(os.getenv("JWT_ACCESS_EXPIRES", "3600"))

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.getenv("REDIS_URL", "memory://")
    LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")

    # Uploads
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10 MB (receipt photos)
    RECEIPT_STORAGE_DIR = os.getenv("RECEIPT_STORAGE_DIR", os.path.join(basedir, "instance", "receipts"))
    RECEIPT_URL_PREFIX = os.getenv("RECEIPT_URL_PREFIX", "/api/v1/receipts")

    # ── Program constants ────────────────────────────────────────────────
    MILEAGE_RATE = float(os.getenv("MILEAGE_RATE", "0.67"))
    EXTERNAL_GRANT_AMOUNT = float(os.getenv("EXTERNAL_GRANT_AMOUNT", "10000.00"))
    GRANT_CATEGORY = os.getenv("GRANT_CATEGORY", "Supplies")
    BUDGET_CAPS = {
        "Personnel": 87719.16,
        "Fringe": 14197.26,
        "Travel": 9648.58,
        "Equipment": 5000.00,
        "Supplies": 4500.00,
        "Contractual": 25000.00,
        "Other": 2000.00,
        "Marketing": 0.00,
    }
    # Submissions from these employees, or from anyone who reports to them,
    # need manager sign-off before admin approval.
    MANAGER_REVIEW_LEADS = _env_list("MANAGER_REVIEW_LEADS", "e6")

    # ── Auth bootstrap ───────────────────────────────────────────────────
    # Emails that are treated as MASTER_ADMIN when no Employee row exists yet
    BOOTSTRAP_ADMIN_EMAILS = _env_list("BOOTSTRAP_ADMIN_EMAILS")

    # ── Welcome banner ───────────────────────────────────────────────────
    WELCOME_BANNER_EMAILS = _env_list("WELCOME_BANNER_EMAILS")  # empty = everyone
    WELCOME_BANNER_INTERVAL_HOURS = float(os.getenv("WELCOME_BANNER_INTERVAL_HOURS", "14"))
    WELCOME_MESSAGES = [
        "Whatever you do, work at it with all your heart.",
        "Let us not become weary in doing good.",
        "Commit to the Lord whatever you do, and he will establish your plans.",
    ]


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    _raw_db_url = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI = (
        _raw_db_url.replace("postgres://", "postgresql://", 1) if _raw_db_url else _SQLITE_DEV
    )


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", _SQLITE_TEST)
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False
    MANAGER_REVIEW_LEADS = ["e6"]
    WELCOME_BANNER_EMAILS = []
    BOOTSTRAP_ADMIN_EMAILS = []


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    # Railway/Heroku use postgres:// but SQLAlchemy 2.0 requires postgresql://
    _raw_db_url = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_DATABASE_URI = _raw_db_url.replace("postgres://", "postgresql://", 1) if _raw_db_url else None
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production

    def __init__(self):
        if not self.SQLALCHEMY_DATABASE_URI:
            raise RuntimeError("DATABASE_URL environment variable is required in production")
        if not os.getenv("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY environment variable must be set in production")


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


PROGRAM_SETTING_KEYS = frozenset({
    "MILEAGE_RATE",
    "EXTERNAL_GRANT_AMOUNT",
    "GRANT_CATEGORY",
    "BUDGET_CAPS",
    "MANAGER_REVIEW_LEADS",
    "BOOTSTRAP_ADMIN_EMAILS",
    "WELCOME_BANNER_EMAILS",
    "WELCOME_BANNER_INTERVAL_HOURS",
    "WELCOME_MESSAGES",
})


def load_program_settings(app, path=None):
    """Overlay program constants from a JSON file onto ``app.config``.

    The file is a flat object whose keys are a subset of
    PROGRAM_SETTING_KEYS; ``BUDGET_CAPS`` is merged per category rather than
    replaced. Unknown keys are logged and ignored.
    """
    path = path or app.config.get("PROGRAM_CONFIG_FILE") or os.getenv("PROGRAM_CONFIG_FILE")
    if not path:
        return
    with open(path, encoding="utf-8") as fh:
        overrides = json.load(fh)

    for key, value in overrides.items():
        if key not in PROGRAM_SETTING_KEYS:
            logger.warning("Ignoring unknown program setting %s in %s", key, path)
            continue
        if key == "BUDGET_CAPS":
            caps = dict(app.config.get("BUDGET_CAPS") or {})
            caps.update({name: float(cap) for name, cap in value.items()})
            app.config["BUDGET_CAPS"] = caps
        else:
            app.config[key] = value
    logger.info("Program settings loaded from %s (%d keys)", path, len(overrides))
