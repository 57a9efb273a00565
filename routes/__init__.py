"""
Flask route blueprints for StampCard.

This module contains all route handlers organized by functionality:
- main: Landing page listing catalogued stamps
- cards: Server-rendered stamp card
- api: JSON endpoints (card view, copy, health)

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .cards import cards_bp
from .api import api_bp

__all__ = [
    "main_bp",
    "cards_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(cards_bp)
    app.register_blueprint(api_bp)
