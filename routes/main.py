"""
Main routes (landing page).
"""

from flask import Blueprint, current_app, render_template

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    """List catalogued stamps, each linking to its card."""
    card_service = current_app.config["CARD_SERVICE"]
    catalog = card_service.catalog
    stamps = [
        {"stamp_id": stamp_id, **catalog.entry_or_blank(stamp_id).to_dict()}
        for stamp_id in catalog
    ]
    return render_template("index.html", stamps=stamps)
