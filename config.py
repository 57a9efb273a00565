"""
Configuration for StampCard.

Values come from the environment (or a .env file next to this module).
The stamp API is an external collaborator; nothing here talks to it.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    TESTING = False

    # ==========================================================================
    # Stamp data source
    # ==========================================================================
    # STAMP_API_BASE_URL: records are fetched from {base}/{stamp_id}
    # STAMP_API_TIMEOUT_SECONDS: per-request timeout; a timeout is a FetchError
    # ==========================================================================
    STAMP_API_BASE_URL = os.environ.get(
        "STAMP_API_BASE_URL", "https://stampchain.io/api/v2/stamps"
    )
    STAMP_API_TIMEOUT_SECONDS = float(
        os.environ.get("STAMP_API_TIMEOUT_SECONDS", "10")
    )

    # Static chapter/page/artist catalog (JSON). Missing file = empty catalog.
    CATALOG_PATH = os.environ.get(
        "CATALOG_PATH", str(BASE_DIR / "data" / "catalog.json")
    )

    # ==========================================================================
    # Card presentation
    # ==========================================================================
    # ACK_DURATION_SECONDS: how long a "copied" acknowledgement stays visible
    # PLACEHOLDER_IMAGE_URL: overrides the built-in SVG placeholder when set
    # ==========================================================================
    ACK_DURATION_SECONDS = float(os.environ.get("ACK_DURATION_SECONDS", "3.0"))
    PLACEHOLDER_IMAGE_URL = os.environ.get("PLACEHOLDER_IMAGE_URL", "")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "production"
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
    STAMP_API_BASE_URL = "http://stamps.test/api/v2/stamps"
    CATALOG_PATH = ""
    ACK_DURATION_SECONDS = 0.01
