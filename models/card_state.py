"""
Card state models.

LoadState is what the data loader publishes for the current identifier.
Orientation is the flip side shown by the view state machine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.stamp import StampRecord


class LoadStatus(Enum):
    """
    Status of the record behind a card.

    Lifecycle:
        IDLE -> LOADING -> (LOADED | FAILED)
        any  -> LOADING (identifier changed or reload requested)
        any  -> IDLE    (card unmounted)
    """

    IDLE = "idle"
    """No identifier requested yet, or the card was unmounted."""

    LOADING = "loading"
    """A fetch is outstanding for the current generation."""

    LOADED = "loaded"
    """The record for the current generation is available."""

    FAILED = "failed"
    """The fetch for the current generation failed. Terminal until re-requested."""


class Orientation(Enum):
    """Which side of the card faces the user."""

    FRONT = "front"
    """Artwork, catalog details and the Buy button."""

    BACK = "back"
    """Dispenser list and the selected dispenser."""


@dataclass(frozen=True)
class LoadState:
    """
    Immutable snapshot of the loader state.

    Every snapshot carries the generation it belongs to, so a consumer can
    ask the loader whether it is still authoritative.
    """

    status: LoadStatus
    """Current lifecycle status."""

    generation: int = 0
    """Request generation this state belongs to."""

    stamp_id: Optional[str] = None
    """Identifier requested for this generation."""

    record: Optional[StampRecord] = None
    """Loaded record (only when status is LOADED)."""

    reason: str = ""
    """User-facing failure message (only when status is FAILED)."""

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.LOADING

    @property
    def is_loaded(self) -> bool:
        return self.status is LoadStatus.LOADED

    @property
    def is_failed(self) -> bool:
        return self.status is LoadStatus.FAILED

    @classmethod
    def create_idle(cls, generation: int = 0) -> "LoadState":
        """State before the first request and after unmount."""
        return cls(status=LoadStatus.IDLE, generation=generation)

    @classmethod
    def create_loading(cls, stamp_id: str, generation: int) -> "LoadState":
        """State as soon as a fetch is started."""
        return cls(status=LoadStatus.LOADING, generation=generation, stamp_id=stamp_id)

    @classmethod
    def create_loaded(cls, record: StampRecord, generation: int) -> "LoadState":
        """State after a successful, still-current fetch."""
        return cls(
            status=LoadStatus.LOADED,
            generation=generation,
            stamp_id=record.stamp_id,
            record=record,
        )

    @classmethod
    def create_failed(cls, stamp_id: str, generation: int, reason: str) -> "LoadState":
        """State after a failed, still-current fetch."""
        return cls(
            status=LoadStatus.FAILED,
            generation=generation,
            stamp_id=stamp_id,
            reason=reason,
        )
