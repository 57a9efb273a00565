"""
Data models for StampCard.

This module contains immutable dataclasses for:
- StampRecord / Offer: one fetched stamp and its dispensers
- CatalogEntry: static chapter/page/artist metadata
- LoadState: loader status for the current identifier
- RenderPlan: how a card preview is drawn
- CardView: everything the page needs to draw one card

All records are frozen; a new fetch replaces them wholesale.
"""

from .stamp import StampRecord, Offer, CatalogEntry
from .card_state import LoadState, LoadStatus, Orientation
from .render_plan import RenderPlan, PreviewKind, PreviewBox, SandboxPolicy
from .card_view import CardView, DispenserView

__all__ = [
    # Render models
    "RenderPlan",
    "PreviewKind",
    "PreviewBox",
    "SandboxPolicy",
    # Stamp models
    "StampRecord",
    "Offer",
    "CatalogEntry",
    # State models
    "LoadState",
    "LoadStatus",
    "Orientation",
    # View models
    "CardView",
    "DispenserView",
]
