"""
Custom exceptions for StampCard.

Exception Hierarchy:
    StampCardError (base)
    ├── FetchError                 - Record could not be loaded (card shows error state)
    │   ├── StampNotFoundError     - Data source has no stamp for the identifier
    │   └── MalformedPayloadError  - Response could not be parsed into a StampRecord
    ├── DecodeError                - Payload does not match its declared content type
    └── OfferNotFoundError         - Selection requested for a dispenser not on the card

Usage:
    FetchError and its subclasses are reduced by the DataLoader to a FAILED state.
    DecodeError is converted by the ContentRenderer into the fallback preview.
    Nothing in this hierarchy escapes the controller to the embedding page.
"""

from typing import Optional, Dict, Any


class StampCardError(Exception):
    """
    Base exception for all StampCard errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# FETCH ERRORS - Card transitions to FAILED, preview and purchase UI hidden
# =============================================================================

class FetchError(StampCardError):
    """
    Network or transport failure while loading a stamp record.

    There is no automatic retry. The card stays in its error state until a
    new identifier (or an explicit reload of the same one) is requested.
    """

    def __init__(
        self,
        stamp_id: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        error_details["stamp_id"] = stamp_id
        super().__init__(f"Failed to fetch stamp {stamp_id}: {reason}", error_details)
        self.stamp_id = stamp_id
        self.reason = reason


class StampNotFoundError(FetchError):
    """The data source answered, but knows nothing about this identifier."""

    def __init__(self, stamp_id: str):
        super().__init__(stamp_id, "stamp not found", {"status_code": 404})


class MalformedPayloadError(FetchError):
    """
    The data source answered with something that is not a stamp record.

    Typical causes:
    - Response body is not JSON
    - Missing "data" or "data.stamp" objects
    - Dispenser rate or quantities are not numeric
    """

    def __init__(self, stamp_id: str, problem: str):
        super().__init__(stamp_id, f"malformed payload ({problem})", {"problem": problem})
        self.problem = problem


# =============================================================================
# RENDER / SELECTION ERRORS - Handled locally, never fatal
# =============================================================================

class DecodeError(StampCardError):
    """
    Payload present but cannot be interpreted as the declared content type.

    This is NOT a fatal state - the record is still LOADED and the renderer
    falls back to the remote URL or the built-in placeholder.
    """

    def __init__(self, content_type: str, reason: str):
        message = f"Cannot decode payload declared as {content_type or '<missing>'}: {reason}"
        super().__init__(message, {"content_type": content_type})
        self.content_type = content_type
        self.reason = reason


class OfferNotFoundError(StampCardError):
    """A dispenser was selected that is not part of the current offer list."""

    def __init__(self, source: str, stamp_id: Optional[str] = None):
        details = {"source": source}
        if stamp_id:
            details["stamp_id"] = stamp_id
        super().__init__(f"No dispenser with source {source} on this card", details)
        self.source = source
