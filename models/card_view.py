"""
Card view models.

A CardView is a point-in-time snapshot of one stamp card, built by the
controller and consumed by templates and the JSON API. It holds display
strings only; no decisions are made from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from models.card_state import LoadStatus, Orientation
from models.render_plan import RenderPlan


@dataclass(frozen=True)
class DispenserView:
    """One dispenser as shown in the selection menu."""

    source: str
    """Full dispenser address (copied to clipboard and encoded in qr_code)."""

    short_source: str
    """Shortened address for display."""

    rate: str
    """BTC per item in plain notation (e.g., '0.0015')."""

    remaining: int
    total: int

    label: str
    """Menu text (e.g., 'bc1qxy...hx0wlh - 0.0015 BTC')."""

    selected: bool = False

    qr_code: str = ""
    """SVG data URI of source as a QR code; set for the selected dispenser only."""

    @property
    def stock_text(self) -> str:
        """Quantity line (e.g., '3/10 left')."""
        return f"{self.remaining}/{self.total} left"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "short_source": self.short_source,
            "rate": self.rate,
            "remaining": self.remaining,
            "total": self.total,
            "label": self.label,
            "stock_text": self.stock_text,
            "selected": self.selected,
            "qr_code": self.qr_code,
        }


@dataclass(frozen=True)
class CardView:
    """
    Everything the page needs to draw one card.

    Visibility rules are already applied: when the record failed to load,
    show_purchase is False and dispensers is empty.
    """

    stamp_id: str
    status: LoadStatus
    orientation: Orientation
    modal_open: bool
    preview: RenderPlan

    heading: str = ""
    """Front header (e.g., 'Chapter 2 - Page 14'); empty parts when not catalogued."""

    artist: str = ""
    error: str = ""

    thumbnail_url: Optional[str] = None
    """Small artwork next to the identifier on the back side."""

    dispensers: List[DispenserView] = field(default_factory=list)
    selected: Optional[DispenserView] = None

    defer_preview: bool = False
    """Card is not in view yet; the page may delay drawing the preview."""

    @property
    def is_loading(self) -> bool:
        return self.status in (LoadStatus.LOADING, LoadStatus.IDLE)

    @property
    def is_failed(self) -> bool:
        return self.status is LoadStatus.FAILED

    @property
    def show_purchase(self) -> bool:
        """Buy button and back side are only offered for a loaded record."""
        return self.status is LoadStatus.LOADED

    @property
    def dispenser_count(self) -> int:
        return len(self.dispensers)

    @property
    def has_no_dispensers(self) -> bool:
        """Loaded record with zero offers (distinct from loading and failed)."""
        return self.show_purchase and not self.dispensers

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "stamp_id": self.stamp_id,
            "status": self.status.value,
            "orientation": self.orientation.value,
            "modal_open": self.modal_open,
            "preview": self.preview.to_dict(),
            "heading": self.heading,
            "artist": self.artist,
            "error": self.error,
            "thumbnail_url": self.thumbnail_url,
            "show_purchase": self.show_purchase,
            "dispenser_count": self.dispenser_count,
            "has_no_dispensers": self.has_no_dispensers,
            "dispensers": [d.to_dict() for d in self.dispensers],
            "selected": self.selected.to_dict() if self.selected else None,
            "defer_preview": self.defer_preview,
        }
