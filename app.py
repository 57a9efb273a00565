"""
StampCard - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration and sets up logging
2. Creates the stamp API client and the catalog lookup
3. Creates the card service (one controller per request)
4. Registers route blueprints
5. Sets up error handlers

ARCHITECTURE:
    Flask request thread
    └── asyncio.run(...) per card request
        └── StampCardController
            ├── DataLoader -> StampAPIClient (requests, in a worker thread)
            ├── DispenserSelector
            ├── ContentRenderer
            ├── ViewStateMachine
            └── ClipboardNotifier

Shared across requests: HTTP client, catalog, renderer (all read-only).
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from flask import Flask, render_template

from logging_config import setup_logging, get_logger
from core.stamp_client import StampAPIClient
from services.card_service import StampCardService
from services.catalog import CatalogLookup
from services.content_renderer import ContentRenderer
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(
    config_object: Union[str, type] = "config.Config",
    card_service: Optional[StampCardService] = None
) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path or class passed to app.config.from_object
        card_service: Pre-built service (tests inject one with a fake client)

    Returns:
        Configured Flask application
    """
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        app_name="stamp_card",
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting StampCard in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    if card_service is None:
        client = StampAPIClient(
            app.config["STAMP_API_BASE_URL"],
            timeout_seconds=app.config.get("STAMP_API_TIMEOUT_SECONDS", 10.0),
        )
        catalog = CatalogLookup.from_json_file(app.config.get("CATALOG_PATH"))
        renderer = ContentRenderer(placeholder_url=app.config.get("PLACEHOLDER_IMAGE_URL", ""))
        card_service = StampCardService(
            client,
            catalog,
            renderer=renderer,
            ack_duration_seconds=app.config.get("ACK_DURATION_SECONDS", 3.0),
        )

        def cleanup():
            """Cleanup on application shutdown."""
            logger.info("Shutting down...")
            client.close()
            logger.info("Shutdown complete")

        atexit.register(cleanup)

    app.config["CARD_SERVICE"] = card_service

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(e):
        return render_template("error.html", message="Page not found."), 404

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return render_template("error.html", message="An unexpected error occurred."), 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
