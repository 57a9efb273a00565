"""Unit tests for the card view state machine."""

import pytest

from models.card_state import Orientation
from services.view_state import (
    BACK_BUTTON,
    BUY_BUTTON,
    CARD_SURFACE,
    COPY_ADDRESS,
    DISPENSER_MENU,
    STAMP_ID_LINK,
    ViewStateMachine,
)


@pytest.fixture
def view():
    return ViewStateMachine()


class TestFlip:
    def test_starts_front_closed(self, view):
        assert view.orientation is Orientation.FRONT
        assert view.modal_open is False

    def test_tap_toggles(self, view):
        assert view.tap() is True
        assert view.is_flipped
        assert view.tap(CARD_SURFACE) is True
        assert view.orientation is Orientation.FRONT

    @pytest.mark.parametrize("region", [
        BUY_BUTTON, BACK_BUTTON, DISPENSER_MENU, COPY_ADDRESS, STAMP_ID_LINK,
    ])
    def test_controls_do_not_flip(self, view, region):
        """Test taps on controls act on the control only."""
        assert view.tap(region) is False
        assert view.orientation is Orientation.FRONT

    def test_buy_and_back_are_idempotent(self, view):
        view.buy()
        view.buy()
        assert view.orientation is Orientation.BACK
        view.back()
        view.back()
        assert view.orientation is Orientation.FRONT


class TestPurchaseModal:
    def test_modal_independent_of_orientation(self, view):
        view.buy()
        view.open_purchase()

        assert view.modal_open is True
        assert view.orientation is Orientation.BACK

        view.close_purchase()
        assert view.modal_open is False
        assert view.orientation is Orientation.BACK

    def test_reset(self, view):
        view.buy()
        view.open_purchase()

        view.reset()

        assert view.orientation is Orientation.FRONT
        assert view.modal_open is False
