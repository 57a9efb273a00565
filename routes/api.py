"""
API routes (JSON endpoints).

Handles:
- /api/stamps/<stamp_id> - Card view as JSON
- /api/stamps/<stamp_id>/copy - Copy action (text + acknowledgement for the page)
- /health - Health check endpoint
"""

from flask import Blueprint, current_app, request

from logging_config import get_logger
from modules.sanitize import (
    MAX_ADDRESS_LENGTH,
    MAX_COPY_TEXT_LENGTH,
    MAX_STAMP_ID_LENGTH,
    sanitize_text,
)


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/api/stamps/<stamp_id>", methods=["GET"])
def card_json(stamp_id: str):
    """
    Card view as JSON.

    Query parameters match the HTML card (dispenser, side). A failed fetch
    is a normal response with status "failed"; only a bad identifier is 400.
    """
    stamp_id = sanitize_text(stamp_id, max_length=MAX_STAMP_ID_LENGTH)
    if not stamp_id:
        return {"error": "Invalid stamp id"}, 400

    dispenser = sanitize_text(request.args.get("dispenser"), max_length=MAX_ADDRESS_LENGTH)
    card_service = current_app.config["CARD_SERVICE"]
    card = card_service.render_card(
        stamp_id,
        dispenser=dispenser or None,
        side=request.args.get("side"),
    )
    return card.to_dict()


@api_bp.route("/api/stamps/<stamp_id>/copy", methods=["POST"])
def copy_text(stamp_id: str):
    """
    Copy action.

    Body: {"text": "<address>"}; without text the stamp id is copied.
    The page writes "text" to the clipboard and shows each acknowledgement
    for its duration_ms.
    """
    payload = request.get_json(silent=True) or {}
    text = sanitize_text(payload.get("text"), max_length=MAX_COPY_TEXT_LENGTH)
    if not text:
        text = sanitize_text(stamp_id, max_length=MAX_STAMP_ID_LENGTH)
    if not text:
        return {"error": "Nothing to copy"}, 400

    card_service = current_app.config["CARD_SERVICE"]
    result = card_service.copy(text)
    return result.to_dict()


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    card_service = current_app.config.get("CARD_SERVICE")
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {},
    }

    if card_service is None:
        health_status["status"] = "degraded"
        health_status["checks"]["card_service"] = "not_initialized"
        return health_status, 503

    health_status["checks"]["card_service"] = "initialized"
    health_status["checks"]["stamp_source"] = card_service.client.base_url
    health_status["checks"]["catalog_size"] = len(card_service.catalog)
    return health_status
