"""
View state machine for one stamp card.

Two orthogonal pieces of state:
    orientation: FRONT <-> BACK (the flip)
    modal_open:  purchase modal visibility

Transitions:
    tap(region)       toggles orientation, unless region opts out of flipping
    buy()             -> BACK
    back()            -> FRONT
    open_purchase()   modal_open = True  (orientation unchanged)
    close_purchase()  modal_open = False
    reset()           FRONT, closed (new identifier = new card)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models.card_state import Orientation


@dataclass(frozen=True)
class InteractiveRegion:
    """
    A named area of the card.

    Buttons, menus, links and inputs are created with opts_out_of_flip=True
    so taps on them act on the control instead of flipping the card.
    """

    name: str
    opts_out_of_flip: bool = True


# The bare card body; tapping it flips
CARD_SURFACE = InteractiveRegion("card", opts_out_of_flip=False)

# Controls on the card
BUY_BUTTON = InteractiveRegion("buy-button")
BACK_BUTTON = InteractiveRegion("back-button")
DISPENSER_MENU = InteractiveRegion("dispenser-menu")
COPY_ADDRESS = InteractiveRegion("copy-address")
STAMP_ID_LINK = InteractiveRegion("stamp-id")


class ViewStateMachine:
    """Flip orientation and purchase modal visibility."""

    def __init__(self) -> None:
        self._orientation = Orientation.FRONT
        self._modal_open = False

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def modal_open(self) -> bool:
        return self._modal_open

    @property
    def is_flipped(self) -> bool:
        return self._orientation is Orientation.BACK

    def tap(self, region: Optional[InteractiveRegion] = None) -> bool:
        """
        Handle a tap on the card.

        Args:
            region: Where the tap landed; None means the bare card body

        Returns:
            True if the card flipped
        """
        if region is not None and region.opts_out_of_flip:
            return False
        self._orientation = (
            Orientation.FRONT if self._orientation is Orientation.BACK else Orientation.BACK
        )
        return True

    def buy(self) -> None:
        self._orientation = Orientation.BACK

    def back(self) -> None:
        self._orientation = Orientation.FRONT

    def open_purchase(self) -> None:
        self._modal_open = True

    def close_purchase(self) -> None:
        self._modal_open = False

    def reset(self) -> None:
        self._orientation = Orientation.FRONT
        self._modal_open = False
