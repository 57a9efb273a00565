"""
Stamp card controller.

Composes the pieces of one card:

    DataLoader          record lifecycle for the current identifier
    DispenserSelector   ordered offers and selection
    ContentRenderer     preview strategy
    ViewStateMachine    flip orientation and purchase modal
    ClipboardNotifier   copy actions

and exposes the interactions the page can trigger. All failures are
reduced to card state here; nothing raises into the embedding page.

Identifier changes:
    Changing the identifier discards the old record immediately (the card
    shows its loading state), resets the view to FRONT/closed and clears
    the selection. The new fetch's result is applied only if no later
    identifier was requested in the meantime.

Usage:
    controller = StampCardController(client.fetch_stamp_async, catalog, notifier)

    await controller.set_stamp_id("A123")
    controller.buy()
    controller.select_dispenser("bc1q...")
    view = controller.view()
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from core.exceptions import OfferNotFoundError
from logging_config import card_context, get_logger
from models.card_state import LoadState
from models.card_view import CardView, DispenserView
from models.stamp import CatalogEntry, Offer, StampRecord
from modules.address_format import (
    format_btc_address,
    format_btc_rate,
    format_dispenser_label,
)
from modules.qr_code import address_qr_data_uri
from services.catalog import CatalogLookup
from services.clipboard_notifier import ClipboardNotifier
from services.content_renderer import ContentRenderer
from services.data_loader import DataLoader, FetchFunc
from services.dispenser_selector import DispenserSelector
from services.view_state import InteractiveRegion, ViewStateMachine


# Module logger
logger = get_logger(__name__)


class PurchaseModal(Protocol):
    """The purchase dialog. Its contents are not this controller's concern."""

    def open(self, record: StampRecord, offer: Optional[Offer]) -> None: ...


class StampCardController:
    """
    One stamp card.

    Attributes:
        stamp_id: Identifier currently requested (None before mount/after unmount)
        state: Current LoadState
        record: Loaded record for stamp_id, if any
    """

    def __init__(
        self,
        fetch: FetchFunc,
        catalog: CatalogLookup,
        clipboard_notifier: ClipboardNotifier,
        renderer: Optional[ContentRenderer] = None,
        purchase_modal: Optional[PurchaseModal] = None
    ):
        """
        Initialize the card.

        Args:
            fetch: Coroutine function loading a StampRecord by identifier
            catalog: Static chapter/page/artist lookup
            clipboard_notifier: Copy capability
            renderer: Preview renderer (default ContentRenderer())
            purchase_modal: Dialog opened by open_purchase()
        """
        self._loader = DataLoader(fetch)
        self._selector = DispenserSelector()
        self._renderer = renderer or ContentRenderer()
        self._view_state = ViewStateMachine()
        self._catalog = catalog
        self._clipboard = clipboard_notifier
        self._purchase_modal = purchase_modal

        self._stamp_id: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._visible = True

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def stamp_id(self) -> Optional[str]:
        return self._stamp_id

    @property
    def state(self) -> LoadState:
        return self._loader.state

    @property
    def record(self) -> Optional[StampRecord]:
        state = self._loader.state
        if state.is_loaded and state.stamp_id == self._stamp_id:
            return state.record
        return None

    @property
    def selector(self) -> DispenserSelector:
        return self._selector

    @property
    def view_state(self) -> ViewStateMachine:
        return self._view_state

    @property
    def catalog_entry(self) -> CatalogEntry:
        if self._stamp_id is None:
            return CatalogEntry()
        return self._catalog.entry_or_blank(self._stamp_id)

    # =========================================================================
    # RECORD LIFECYCLE
    # =========================================================================

    async def set_stamp_id(self, stamp_id: str) -> LoadState:
        """
        Show stamp_id on this card and wait for its record.

        Returns:
            The loader state after this request finished. If a newer
            identifier was requested meanwhile, that request's state.
        """
        self._begin(stamp_id)
        await self._load(stamp_id)
        return self._loader.state

    def request_stamp(self, stamp_id: str) -> asyncio.Task:
        """
        Switch to stamp_id without waiting (must be called inside the event loop).

        Any previous load task is cancelled. Its HTTP request may still
        complete; the result is dropped by the loader.

        Returns:
            The task loading stamp_id
        """
        self._begin(stamp_id)
        self._task = asyncio.get_running_loop().create_task(self._load(stamp_id))
        return self._task

    async def reload(self) -> LoadState:
        """Fetch the current identifier again (e.g., after a failure)."""
        if self._stamp_id is None:
            return self._loader.state
        return await self.set_stamp_id(self._stamp_id)

    def unmount(self) -> None:
        """Tear the card down; outstanding fetches are ignored from now on."""
        self._cancel_task()
        self._loader.discard()
        self._selector.clear()
        self._view_state.reset()
        self._stamp_id = None

    def _begin(self, stamp_id: str) -> None:
        self._cancel_task()
        if stamp_id != self._stamp_id:
            logger.debug(f"Card switching {self._stamp_id} -> {stamp_id}")
        self._stamp_id = stamp_id
        self._loader.discard()
        self._selector.clear()
        self._view_state.reset()

    async def _load(self, stamp_id: str) -> None:
        with card_context(stamp_id):
            state = await self._loader.load(stamp_id)
            if state.is_loaded and self._loader.is_current(state.generation):
                self._selector.reset(state.record)

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    # =========================================================================
    # INTERACTIONS
    # =========================================================================

    def tap(self, region: Optional[InteractiveRegion] = None) -> bool:
        """Tap on the card; returns True if it flipped."""
        if self._loader.state.is_failed:
            return False
        return self._view_state.tap(region)

    def buy(self) -> bool:
        """'Buy Art': show the dispenser side. Only for a loaded record."""
        if self.record is None:
            return False
        self._view_state.buy()
        return True

    def back(self) -> None:
        self._view_state.back()

    def open_purchase(self) -> bool:
        """
        Open the purchase modal for the record and selected dispenser.

        Returns:
            False (and nothing opens) unless a record is loaded
        """
        record = self.record
        if record is None:
            logger.debug("Purchase requested without a loaded record; ignored")
            return False

        self._view_state.open_purchase()
        if self._purchase_modal is not None:
            self._purchase_modal.open(record, self._selector.selected)
        return True

    def close_purchase(self) -> None:
        self._view_state.close_purchase()

    def select_dispenser(self, source: str) -> Optional[Offer]:
        """
        Select a dispenser by address.

        Returns:
            The selected Offer, or None if source is not on this card
            (selection unchanged)
        """
        try:
            return self._selector.select(source)
        except OfferNotFoundError as e:
            logger.warning(str(e))
            return None

    def copy_address(self, address: str) -> None:
        self._clipboard.copy(address)

    def copy_selected_address(self) -> bool:
        """Copy the selected dispenser's address; False if nothing is selected."""
        selected = self._selector.selected
        if selected is None:
            return False
        self._clipboard.copy(selected.source)
        return True

    def copy_stamp_id(self) -> bool:
        if self._stamp_id is None:
            return False
        self._clipboard.copy(self._stamp_id)
        return True

    def set_visible(self, visible: bool) -> None:
        """Viewport signal; only lets the page defer drawing the preview."""
        self._visible = visible

    # =========================================================================
    # VIEW
    # =========================================================================

    def view(self) -> CardView:
        """Snapshot of everything the page needs to draw this card."""
        state = self._loader.state
        entry = self.catalog_entry
        record = self.record

        dispensers = []
        selected_view = None
        if record is not None:
            selected = self._selector.selected
            for offer in self._selector.offers:
                item = _dispenser_view(offer, selected=(offer == selected))
                dispensers.append(item)
                if item.selected:
                    selected_view = item

        return CardView(
            stamp_id=self._stamp_id or "",
            status=state.status,
            orientation=self._view_state.orientation,
            modal_open=self._view_state.modal_open,
            preview=self._renderer.plan_for(state),
            heading=entry.heading,
            artist=entry.artist,
            error=state.reason if state.is_failed else "",
            thumbnail_url=self._renderer.thumbnail_for(record),
            dispensers=dispensers,
            selected=selected_view,
            defer_preview=not self._visible,
        )


def _dispenser_view(offer: Offer, selected: bool = False) -> DispenserView:
    return DispenserView(
        source=offer.source,
        short_source=format_btc_address(offer.source),
        rate=format_btc_rate(offer.rate),
        remaining=offer.remaining,
        total=offer.total,
        label=format_dispenser_label(offer.source, offer.rate),
        selected=selected,
        qr_code=address_qr_data_uri(offer.source) if selected else "",
    )
