"""
Unit tests for the dispenser selector.

Ordering, default selection and explicit selection rules.
"""

import pytest

from core.exceptions import OfferNotFoundError
from services.dispenser_selector import DispenserSelector, derive, sort_offers

from conftest import make_offer, make_record


@pytest.fixture
def selector():
    return DispenserSelector()


class TestDerive:
    """Test the pure derive()/sort_offers() functions."""

    def test_sorted_ascending_with_cheapest_selected(self, three_offer_record):
        """Test rates [0.002, 0.0015, 0.003] come out as [0.0015, 0.002, 0.003]."""
        offers, selection = derive(three_offer_record)

        assert [str(o.rate) for o in offers] == ["0.0015", "0.002", "0.003"]
        assert selection is offers[0]
        assert str(selection.rate) == "0.0015"

    def test_ties_keep_fetch_order(self):
        """Test equal rates stay in the order they were fetched."""
        offers = [
            make_offer("first", "0.001"),
            make_offer("cheap", "0.0005"),
            make_offer("second", "0.001"),
            make_offer("third", "0.001"),
        ]

        ordered = sort_offers(offers)

        assert [o.source for o in ordered] == ["cheap", "first", "second", "third"]

    def test_order_is_monotonic(self):
        """Test every neighbouring pair is non-decreasing."""
        rates = ["0.01", "0.0001", "0.5", "0.0001", "0.02", "0.003"]
        ordered = sort_offers([make_offer(f"s{i}", r) for i, r in enumerate(rates)])

        for left, right in zip(ordered, ordered[1:]):
            assert left.rate <= right.rate

    def test_empty_offers_empty_selection(self):
        offers, selection = derive(make_record(offers=[]))
        assert offers == ()
        assert selection is None

    def test_no_record(self):
        assert derive(None) == ((), None)


class TestDispenserSelector:
    """Test the stateful selector."""

    def test_initially_empty(self, selector):
        assert selector.offers == ()
        assert selector.selected is None
        assert selector.is_empty is True

    def test_reset_applies_default(self, selector, three_offer_record):
        default = selector.reset(three_offer_record)

        assert default.source.startswith("bc1qcheap")
        assert selector.selected == default
        assert len(selector.offers) == 3

    def test_explicit_selection_overrides_default(self, selector, three_offer_record):
        selector.reset(three_offer_record)
        pricey = selector.offers[-1]

        chosen = selector.select(pricey.source)

        assert chosen == pricey
        assert selector.selected == pricey

    def test_selection_is_always_a_member(self, selector, three_offer_record):
        selector.reset(three_offer_record)
        selector.select(selector.offers[1].source)
        assert selector.selected in selector.offers

    def test_unknown_source_keeps_selection(self, selector, three_offer_record):
        """Test selecting a non-member raises and leaves the selection alone."""
        selector.reset(three_offer_record)
        before = selector.selected

        with pytest.raises(OfferNotFoundError) as exc_info:
            selector.select("bc1qnot-on-this-card")

        assert exc_info.value.source == "bc1qnot-on-this-card"
        assert selector.selected == before

    def test_new_record_reapplies_default(self, selector, three_offer_record):
        """Test an explicit selection does not survive a record replacement."""
        selector.reset(three_offer_record)
        selector.select(selector.offers[-1].source)

        replacement = make_record(
            stamp_id="B222",
            offers=[make_offer("bc1qb-high", "0.9"), make_offer("bc1qb-low", "0.1")],
        )
        selector.reset(replacement)

        assert selector.selected.source == "bc1qb-low"
        assert all(o.source.startswith("bc1qb-") for o in selector.offers)

    def test_zero_offer_record(self, selector, three_offer_record):
        selector.reset(three_offer_record)
        selector.reset(make_record(stamp_id="B222", offers=[]))

        assert selector.is_empty is True
        assert selector.selected is None

    def test_clear(self, selector, three_offer_record):
        selector.reset(three_offer_record)
        selector.clear()
        assert selector.offers == ()
        assert selector.selected is None
