"""
RAMP Portal
Flask Application Factory.

Usage:
    from ramp_portal import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from ramp_portal.config import config, load_program_settings
from ramp_portal.middleware.jwt_auth import init_jwt_middleware
from ramp_portal.middleware.logging_config import configure_logging
from ramp_portal.middleware.rate_limiter import init_rate_limits
from ramp_portal.middleware.security_headers import init_security_headers
from ramp_portal.middleware.timing import init_request_timing
from ramp_portal.models import db

logger = logging.getLogger(__name__)


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit; applied per blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)

# Content types accepted on POST/PUT/PATCH under /api/
_ACCEPTED_BODY_TYPES = ("json", "multipart/form-data", "application/x-www-form-urlencoded")


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: "development", "testing" or "production".
            Defaults to the APP_ENV environment variable.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])
    load_program_settings(app)

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Middleware ───────────────────────────────────────────────────────
    init_security_headers(app)
    init_request_timing(app)
    init_jwt_middleware(app)

    @app.before_request
    def _guard_request():
        from flask import abort, request as _req
        if _req.method in ("POST", "PUT", "PATCH") and _req.path.startswith("/api/"):
            ct = _req.content_type or ""
            if _req.data and not any(t in ct for t in _ACCEPTED_BODY_TYPES):
                abort(415, description="Content-Type must be application/json or multipart/form-data")

    # ── Import all models so Alembic can detect them ─────────────────────
    from ramp_portal.models import employee as _employee_models    # noqa: F401
    from ramp_portal.models import timesheet as _timesheet_models  # noqa: F401
    from ramp_portal.models import program as _program_models      # noqa: F401
    from ramp_portal.models import ledger as _ledger_models        # noqa: F401
    from ramp_portal.models import settings as _settings_models    # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ─────────────────────────
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///") and not app.config["TESTING"]:
        os.makedirs(app.instance_path, exist_ok=True)
    with app.app_context():
        db.create_all()

    # ── Blueprints ───────────────────────────────────────────────────────
    from ramp_portal.blueprints.approval_bp import approval_bp
    from ramp_portal.blueprints.auth_bp import auth_bp
    from ramp_portal.blueprints.config_bp import config_bp
    from ramp_portal.blueprints.dashboard_bp import dashboard_bp
    from ramp_portal.blueprints.employee_bp import employee_bp
    from ramp_portal.blueprints.export_bp import export_bp
    from ramp_portal.blueprints.preference_bp import preference_bp
    from ramp_portal.blueprints.receipts_bp import receipts_bp
    from ramp_portal.blueprints.shift_bp import shift_bp
    from ramp_portal.blueprints.timesheet_bp import timesheet_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(employee_bp)
    app.register_blueprint(timesheet_bp)
    app.register_blueprint(approval_bp)
    app.register_blueprint(shift_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(export_bp)
    app.register_blueprint(config_bp)
    app.register_blueprint(preference_bp)
    app.register_blueprint(receipts_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-db")
    def seed_db_cmd():
        """Load the initial employees, shifts, cohorts and tooltips."""
        from ramp_portal.services.seed_service import seed_database
        counts = seed_database()
        click.echo(f"Seeded: {counts}")

    @app.cli.command("set-password")
    @click.argument("email")
    @click.password_option()
    def set_password_cmd(email, password):
        """Set the login password for an existing employee."""
        from ramp_portal.services.employee_service import set_password
        employee = set_password(email, password)
        click.echo(f"Password set for {employee.email}")

    # ── Health check ─────────────────────────────────────────────────────
    @app.route("/api/v1/health")
    def health():
        return {"status": "ok", "app": "RAMP Portal"}

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        from flask import request
        return {"error": "Not found", "code": "ERR_NOT_FOUND", "path": request.path}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(413)
    def too_large(e):
        return {"error": "Request body too large"}, 413

    @app.errorhandler(415)
    def unsupported_media(e):
        return {"error": e.description}, 415

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    logger.info("RAMP Portal started (config=%s)", config_name)
    return app
