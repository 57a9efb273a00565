"""
Stamp card route.

Renders one card server-side. Interactions that change what is drawn are
encoded in the query string:

    ?dispenser=<address>   select a dispenser other than the cheapest
    ?side=back             show the dispenser side
    ?purchase=1            open the purchase modal
"""

from flask import Blueprint, abort, current_app, render_template, request

from logging_config import get_logger
from modules.sanitize import MAX_ADDRESS_LENGTH, MAX_STAMP_ID_LENGTH, sanitize_text
from services.card_service import PurchaseContext


# Module logger
logger = get_logger(__name__)

cards_bp = Blueprint("cards", __name__)


@cards_bp.route("/stamps/<stamp_id>", methods=["GET"])
def stamp_card(stamp_id: str):
    """
    Display a stamp card.

    A failed fetch still renders (status 200) with only the error message;
    the card never shows a partial preview.
    """
    stamp_id = sanitize_text(stamp_id, max_length=MAX_STAMP_ID_LENGTH)
    if not stamp_id:
        abort(404)

    dispenser = sanitize_text(request.args.get("dispenser"), max_length=MAX_ADDRESS_LENGTH)
    side = request.args.get("side", "front")
    purchase = request.args.get("purchase") == "1"

    card_service = current_app.config["CARD_SERVICE"]
    purchase_context = PurchaseContext()
    card = card_service.render_card(
        stamp_id,
        dispenser=dispenser or None,
        side=side,
        purchase=purchase,
        purchase_context=purchase_context,
    )

    if card.is_failed:
        logger.info(f"Card {stamp_id} rendered in error state: {card.error}")

    return render_template(
        "stamp_card.html",
        card=card,
        purchase=purchase_context.opened,
    )
