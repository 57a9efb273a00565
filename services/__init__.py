"""
Services layer for StampCard.

This module contains the card logic:
- DataLoader: record fetch lifecycle with request generations
- DispenserSelector: ordered offers and current selection
- ContentRenderer: preview strategy and markup sandbox
- ViewStateMachine: flip orientation and purchase modal
- ClipboardNotifier: copy with transient acknowledgement
- StampCardController: one card, composed from the above
- CatalogLookup: static chapter/page/artist metadata
- StampCardService: per-request controllers for the web layer

Concurrency Model:
    Single event loop per card; the awaited fetch is the only suspension
    point. No locks.
"""

from .data_loader import DataLoader
from .dispenser_selector import DispenserSelector
from .content_renderer import ContentRenderer
from .view_state import ViewStateMachine, InteractiveRegion
from .clipboard_notifier import ClipboardNotifier, Acknowledgement
from .catalog import CatalogLookup
from .stamp_card import StampCardController
from .card_service import StampCardService

__all__ = [
    "DataLoader",
    "DispenserSelector",
    "ContentRenderer",
    "ViewStateMachine",
    "InteractiveRegion",
    "ClipboardNotifier",
    "Acknowledgement",
    "CatalogLookup",
    "StampCardController",
    "StampCardService",
]
