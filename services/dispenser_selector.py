"""
Dispenser selector: ordered offers and the current selection for one card.

Rules:
    - Offers are sorted ascending by rate; equal rates keep fetch order
    - Every new record resets the selection to the cheapest offer
      (or None when there are no offers)
    - An explicit selection lasts until the next record replaces this one
    - Selecting never touches the network
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from core.exceptions import OfferNotFoundError
from logging_config import get_logger
from models.stamp import Offer, StampRecord


# Module logger
logger = get_logger(__name__)


def sort_offers(offers: Sequence[Offer]) -> Tuple[Offer, ...]:
    """Offers ascending by rate. sorted() is stable, so ties keep fetch order."""
    return tuple(sorted(offers, key=lambda offer: offer.rate))


def derive(record: Optional[StampRecord]) -> Tuple[Tuple[Offer, ...], Optional[Offer]]:
    """
    Compute the ordered offer list and default selection for a record.

    Args:
        record: Loaded record, or None when nothing is loaded

    Returns:
        (ordered_offers, selection) where selection is the cheapest offer,
        or None if there are no offers
    """
    if record is None:
        return (), None
    ordered = sort_offers(record.offers)
    return ordered, (ordered[0] if ordered else None)


class DispenserSelector:
    """
    Holds the ordered offers and selection for the record on display.

    Attributes:
        offers: Offers ascending by rate
        selected: Current selection; None iff offers is empty
    """

    def __init__(self) -> None:
        self._stamp_id: Optional[str] = None
        self._offers: Tuple[Offer, ...] = ()
        self._selected: Optional[Offer] = None

    @property
    def offers(self) -> Tuple[Offer, ...]:
        return self._offers

    @property
    def selected(self) -> Optional[Offer]:
        return self._selected

    @property
    def is_empty(self) -> bool:
        return not self._offers

    def reset(self, record: StampRecord) -> Optional[Offer]:
        """
        Adopt a freshly loaded record and apply the default selection.

        Returns:
            The default selection (cheapest offer or None)
        """
        self._stamp_id = record.stamp_id
        self._offers, self._selected = derive(record)
        logger.debug(
            f"{len(self._offers)} dispensers for {record.stamp_id}, "
            f"default {self._selected.source if self._selected else 'none'}"
        )
        return self._selected

    def select(self, source: str) -> Offer:
        """
        Explicitly select the offer with the given source address.

        Args:
            source: Dispenser address

        Returns:
            The selected Offer

        Raises:
            OfferNotFoundError: If no offer on the current record has that
                source; the previous selection is kept
        """
        for offer in self._offers:
            if offer.source == source:
                self._selected = offer
                return offer
        raise OfferNotFoundError(source, self._stamp_id)

    def clear(self) -> None:
        """Drop offers and selection (record replaced or unmounted)."""
        self._stamp_id = None
        self._offers = ()
        self._selected = None
