"""
Core module for StampCard.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- stamp_client: HTTP client for the stamp data source

The client is imported from core.stamp_client directly; it depends on
models, which in turn depend on the exceptions exported here.
"""

from .exceptions import (
    StampCardError,
    FetchError,
    StampNotFoundError,
    MalformedPayloadError,
    DecodeError,
    OfferNotFoundError,
)

__all__ = [
    "StampCardError",
    "FetchError",
    "StampNotFoundError",
    "MalformedPayloadError",
    "DecodeError",
    "OfferNotFoundError",
]
