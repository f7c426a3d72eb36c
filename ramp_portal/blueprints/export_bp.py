"""
CPA export.

    GET /api/v1/exports/cpa?format=csv|excel   (default: csv)

Content is built in memory and returned as an attachment.
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, Response, g, request

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.middleware.permission_required import require_permission
from ramp_portal.services.export_service import generate_cpa_csv, generate_cpa_xlsx
from ramp_portal.utils.errors import E, api_error

logger = logging.getLogger(__name__)

export_bp = Blueprint("export", __name__, url_prefix="/api/v1")
register_error_handlers(export_bp)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@export_bp.route("/exports/cpa", methods=["GET"])
@require_permission("export.run")
def export_cpa():
    """Download every approved time log and travel request.

    Query params:
        format: csv | excel (default: csv)
    """
    fmt = request.args.get("format", "csv").lower()
    if fmt not in ("csv", "excel"):
        return api_error(E.VALIDATION_INVALID, "Unsupported format. Supported values: csv, excel.")

    date_str = datetime.now(timezone.utc).strftime("%Y%m%d")
    if fmt == "excel":
        content = generate_cpa_xlsx(g.current_employee)
        return Response(
            content.getvalue(),
            mimetype=XLSX_MIMETYPE,
            headers={"Content-Disposition": f"attachment; filename=CPA_Export_{date_str}.xlsx"},
        )

    content = generate_cpa_csv(g.current_employee)
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=CPA_Export_{date_str}.csv"},
    )
