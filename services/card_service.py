"""
Card service: builds stamp cards for the web layer.

Flask handlers are synchronous, so each request gets a fresh controller
and a short-lived event loop (asyncio.run). Long-lived collaborators (HTTP
client, catalog, renderer) are created once at startup and shared.

The browser owns the real clipboard and toast surface. Server-side, copy
actions are collected into a CopyResult and sent back as JSON; the page
writes the text with navigator.clipboard and dismisses the toast after
duration_ms.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.stamp_client import StampAPIClient
from logging_config import get_logger
from models.card_view import CardView
from models.stamp import Offer, StampRecord
from services.catalog import CatalogLookup
from services.clipboard_notifier import Acknowledgement, ClipboardNotifier
from services.content_renderer import ContentRenderer
from services.stamp_card import StampCardController


# Module logger
logger = get_logger(__name__)


class PendingClipboard:
    """Collects copied text for the response."""

    def __init__(self) -> None:
        self.texts: List[str] = []

    def copy(self, text: str) -> None:
        self.texts.append(text)


class PendingNotifier:
    """Collects acknowledgements for the response; the page dismisses them."""

    def __init__(self) -> None:
        self.acks: List[Acknowledgement] = []

    def notify(self, ack: Acknowledgement) -> None:
        self.acks.append(ack)

    def dismiss(self, ack: Acknowledgement) -> None:
        pass


def _client_side_dismissal(delay: float, callback) -> None:
    # Dismissal happens in the browser after duration_ms
    return None


class PurchaseContext:
    """Purchase modal stand-in that remembers what it was opened with."""

    def __init__(self) -> None:
        self.opened: Optional[Tuple[StampRecord, Optional[Offer]]] = None

    def open(self, record: StampRecord, offer: Optional[Offer]) -> None:
        self.opened = (record, offer)


@dataclass
class CopyResult:
    """What a copy request sends back to the page."""

    texts: List[str] = field(default_factory=list)
    acknowledgements: List[Acknowledgement] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.texts[-1] if self.texts else "",
            "acknowledgements": [a.to_dict() for a in self.acknowledgements],
        }


class StampCardService:
    """
    Shared collaborators plus a per-request controller factory.

    Attributes:
        client: Stamp data source
        catalog: Chapter/page/artist lookup
        renderer: Preview renderer
    """

    def __init__(
        self,
        client: StampAPIClient,
        catalog: CatalogLookup,
        renderer: Optional[ContentRenderer] = None,
        ack_duration_seconds: float = 3.0
    ):
        self._client = client
        self._catalog = catalog
        self._renderer = renderer or ContentRenderer()
        self._ack_duration = ack_duration_seconds

        logger.info(
            f"StampCardService initialized (source: {client.base_url}, "
            f"{len(catalog)} catalogued stamps)"
        )

    @property
    def client(self) -> StampAPIClient:
        return self._client

    @property
    def catalog(self) -> CatalogLookup:
        return self._catalog

    @property
    def renderer(self) -> ContentRenderer:
        return self._renderer

    def _notifier_for_request(self) -> Tuple[ClipboardNotifier, PendingClipboard, PendingNotifier]:
        clipboard = PendingClipboard()
        notifier = PendingNotifier()
        clipboard_notifier = ClipboardNotifier(
            clipboard,
            notifier,
            duration_seconds=self._ack_duration,
            scheduler=_client_side_dismissal,
        )
        return clipboard_notifier, clipboard, notifier

    def create_controller(
        self,
        purchase_modal: Optional[PurchaseContext] = None
    ) -> StampCardController:
        """New card controller wired to the shared collaborators."""
        clipboard_notifier, _, _ = self._notifier_for_request()
        return StampCardController(
            self._client.fetch_stamp_async,
            self._catalog,
            clipboard_notifier,
            renderer=self._renderer,
            purchase_modal=purchase_modal,
        )

    def render_card(
        self,
        stamp_id: str,
        dispenser: Optional[str] = None,
        side: Optional[str] = None,
        purchase: bool = False,
        purchase_context: Optional[PurchaseContext] = None
    ) -> CardView:
        """
        Load a card and apply the interactions encoded in the request.

        Args:
            stamp_id: Identifier to show
            dispenser: Source address to select instead of the cheapest
            side: "back" to show the dispenser side
            purchase: Open the purchase modal
            purchase_context: Receives (record, offer) when the modal opens

        Returns:
            CardView snapshot (a failed fetch is a view with status FAILED)
        """

        async def build() -> CardView:
            controller = self.create_controller(purchase_modal=purchase_context)
            await controller.set_stamp_id(stamp_id)
            if dispenser:
                controller.select_dispenser(dispenser)
            if side == "back":
                controller.buy()
            if purchase:
                controller.open_purchase()
            return controller.view()

        return asyncio.run(build())

    def copy(self, text: str) -> CopyResult:
        """Run a copy action and collect what the page must do."""
        clipboard_notifier, clipboard, notifier = self._notifier_for_request()
        clipboard_notifier.copy(text)
        return CopyResult(texts=clipboard.texts, acknowledgements=notifier.acks)
