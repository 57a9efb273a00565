"""
Stamp record data models.

These models represent a single fetched stamp and its purchase offers.
Used by the data loader (produced), the dispenser selector and the
content renderer (consumed).

Immutability:
    - StampRecord, Offer and CatalogEntry are frozen dataclasses
    - A new identifier produces a whole new StampRecord, never a mutation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional, Tuple

from core.exceptions import MalformedPayloadError


@dataclass(frozen=True)
class Offer:
    """
    A dispenser listing for a stamp.

    Equality and hashing use only the source address, so two fetches of the
    same dispenser compare equal even when quantities changed.
    """

    source: str
    """Dispenser address (BTC)."""

    rate: Decimal = field(compare=False)
    """Price per item in BTC."""

    remaining: int = field(default=0, compare=False)
    """Items still available from this dispenser."""

    total: int = field(default=0, compare=False)
    """Items originally escrowed in this dispenser."""

    @classmethod
    def from_api_data(cls, stamp_id: str, data: Dict[str, Any]) -> "Offer":
        """
        Create an Offer from one entry of the API "dispensers" array.

        Raises:
            MalformedPayloadError: If source is missing or numbers don't parse
        """
        if not isinstance(data, dict):
            raise MalformedPayloadError(stamp_id, "dispenser entry is not an object")

        source = data.get("source")
        if not source or not isinstance(source, str):
            raise MalformedPayloadError(stamp_id, "dispenser without source address")

        try:
            # str() first so 0.0015 stays 0.0015 instead of its binary expansion
            rate = Decimal(str(data.get("btcrate")))
            remaining = int(data.get("give_remaining", 0) or 0)
            total = int(data.get("escrow_quantity", 0) or 0)
        except (InvalidOperation, TypeError, ValueError):
            raise MalformedPayloadError(stamp_id, f"dispenser {source} has non-numeric fields")

        if not rate.is_finite():
            raise MalformedPayloadError(stamp_id, f"dispenser {source} has non-finite rate")

        return cls(source=source, rate=rate, remaining=remaining, total=total)


@dataclass(frozen=True)
class StampRecord:
    """
    A fully fetched stamp.

    The payload is either inline (base64 text, decoded only at render time)
    or a remote URL, and often both.
    """

    stamp_id: str
    """Opaque identifier the record was fetched for (cpid)."""

    content_type: str
    """Declared mime-like type, e.g. 'image/png' or 'text/html'."""

    payload_base64: Optional[str] = None
    """Inline payload, base64 encoded."""

    url: Optional[str] = None
    """Remote location of the artifact."""

    offers: Tuple[Offer, ...] = ()
    """Dispensers in fetch order (unsorted)."""

    @property
    def has_offers(self) -> bool:
        return len(self.offers) > 0

    @classmethod
    def from_api_data(cls, stamp_id: str, payload: Dict[str, Any]) -> "StampRecord":
        """
        Create a StampRecord from the stamp API response body.

        Expected shape:
            {"data": {"stamp": {...}, "dispensers": [...]}}

        Args:
            stamp_id: Identifier that was requested
            payload: Decoded JSON body

        Returns:
            StampRecord with offers in fetch order

        Raises:
            MalformedPayloadError: If the body doesn't have the expected shape
        """
        if not isinstance(payload, dict):
            raise MalformedPayloadError(stamp_id, "body is not an object")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise MalformedPayloadError(stamp_id, "missing 'data' object")

        stamp = data.get("stamp")
        if not isinstance(stamp, dict):
            raise MalformedPayloadError(stamp_id, "missing 'data.stamp' object")

        dispensers = data.get("dispensers") or []
        if not isinstance(dispensers, list):
            raise MalformedPayloadError(stamp_id, "'data.dispensers' is not a list")

        offers = tuple(Offer.from_api_data(stamp_id, d) for d in dispensers)

        return cls(
            stamp_id=stamp_id,
            content_type=(stamp.get("stamp_mimetype") or "").strip().lower(),
            payload_base64=stamp.get("stamp_base64") or None,
            url=stamp.get("stamp_url") or None,
            offers=offers,
        )


@dataclass(frozen=True)
class CatalogEntry:
    """
    Static chapter/page/artist metadata for a stamp.

    Comes from the catalog lookup, not from the stamp API. A stamp missing
    from the catalog simply renders these fields empty.
    """

    chapter: str = ""
    page: str = ""
    artist: str = ""

    @property
    def heading(self) -> str:
        """Card header text (e.g., 'Chapter 2 - Page 14')."""
        return f"Chapter {self.chapter} - Page {self.page}"

    def to_dict(self) -> Dict[str, Any]:
        return {"chapter": self.chapter, "page": self.page, "artist": self.artist}
