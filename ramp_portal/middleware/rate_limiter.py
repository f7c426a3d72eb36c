"""
Rate limiting configuration.

The Limiter instance is created in ramp_portal/__init__.py with no default
limits; this module applies limits per blueprint.

Usage:
    from ramp_portal.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Auth (login):     LOGIN_RATE_LIMIT (default 10/minute)
        - Submissions:      60/minute (receipt uploads)

    Rate limiting is disabled in testing mode.
    """
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    bp = app.blueprints.get("auth")
    if bp:
        limiter.limit(app.config["LOGIN_RATE_LIMIT"])(bp)

    bp = app.blueprints.get("timesheet")
    if bp:
        limiter.limit("60/minute")(bp)

    app.logger.info("Rate limiter configured — auth: %s, submissions: 60/min",
                    app.config["LOGIN_RATE_LIMIT"])
