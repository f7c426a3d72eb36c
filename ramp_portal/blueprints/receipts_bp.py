"""
Receipt retrieval for authenticated users.

    GET /api/v1/receipts/<key>
"""

from flask import Blueprint, send_file

from ramp_portal.blueprints import register_error_handlers
from ramp_portal.services.storage_service import ReceiptStorage

receipts_bp = Blueprint("receipts", __name__, url_prefix="/api/v1/receipts")
register_error_handlers(receipts_bp)


@receipts_bp.route("/<path:key>", methods=["GET"])
def get_receipt(key):
    path = ReceiptStorage().open(key)
    return send_file(path, download_name=path.name)
