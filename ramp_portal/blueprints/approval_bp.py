"""
Approval endpoints.

    GET  /api/v1/approvals/pending
    POST /api/v1/approvals/<record_type>/<record_id>/<decision>
         record_type: time_log | travel_request
         decision:    approve | reject
    GET  /api/v1/financials         ledger total + reconciliation
"""

from flask import Blueprint, g, jsonify

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.middleware.permission_required import require_any_permission, require_permission
from ramp_portal.services import approval_service

approval_bp = Blueprint("approval", __name__, url_prefix="/api/v1")
register_error_handlers(approval_bp)


@approval_bp.route("/approvals/pending", methods=["GET"])
@require_permission("approvals.view")
def pending():
    return jsonify(approval_service.pending_queue(g.current_employee)), 200


@approval_bp.route("/approvals/<record_type>/<int:record_id>/<decision>", methods=["POST"])
@require_any_permission("approvals.manager", "approvals.admin")
def decide(record_type, record_id, decision):
    record = approval_service.decide(g.current_employee, record_type, record_id, decision)
    return jsonify(record.to_dict()), 200


@approval_bp.route("/financials", methods=["GET"])
@require_permission("financials.view")
def financials():
    return jsonify(approval_service.ledger_summary(g.current_employee)), 200
