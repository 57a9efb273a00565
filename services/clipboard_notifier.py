"""
Clipboard notifier: best-effort copy with a transient acknowledgement.

copy() never fails from the caller's point of view. Clipboard and
notification failures are logged and swallowed. Every call shows its own
acknowledgement and schedules its own dismissal; copying the same text
twice shows two.

The clipboard, the notification surface and the timer are injected, so the
card can run against a browser bridge, a desktop clipboard, or test fakes.
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

ACK_TITLE = "Pepe Says"
ACK_DESCRIPTION = "Successfully copied, bro"
DEFAULT_ACK_DURATION_SECONDS = 3.0


class Clipboard(Protocol):
    def copy(self, text: str) -> None: ...


class Notifier(Protocol):
    def notify(self, ack: "Acknowledgement") -> None: ...

    def dismiss(self, ack: "Acknowledgement") -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Any]


@dataclass(frozen=True)
class Acknowledgement:
    """A transient "copied" notification."""

    ack_id: int
    """Unique per copy() call, so identical acknowledgements stay distinct."""

    text: str
    """What was copied."""

    title: str = ACK_TITLE
    description: str = ACK_DESCRIPTION
    duration_seconds: float = DEFAULT_ACK_DURATION_SECONDS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.ack_id,
            "title": self.title,
            "description": self.description,
            "duration_ms": int(self.duration_seconds * 1000),
        }


def call_later(delay: float, callback: Callable[[], None]) -> Any:
    """
    Default scheduler.

    Uses the running event loop when there is one; otherwise a daemon
    timer thread (e.g., when called from a plain Flask request handler).
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
    return loop.call_later(delay, callback)


class ClipboardNotifier:
    """
    Copy-to-clipboard with acknowledgement.

    Attributes:
        duration_seconds: How long each acknowledgement stays up
        active: Acknowledgements shown and not yet dismissed
    """

    def __init__(
        self,
        clipboard: Clipboard,
        notifier: Notifier,
        duration_seconds: float = DEFAULT_ACK_DURATION_SECONDS,
        scheduler: Optional[Scheduler] = None
    ):
        self._clipboard = clipboard
        self._notifier = notifier
        self._duration = duration_seconds
        self._schedule = scheduler or call_later
        self._ids = itertools.count(1)
        self._active: List[Acknowledgement] = []

    @property
    def duration_seconds(self) -> float:
        return self._duration

    @property
    def active(self) -> List[Acknowledgement]:
        return list(self._active)

    def copy(self, text: str) -> None:
        """
        Copy text and show an acknowledgement.

        Always returns normally.
        """
        try:
            self._clipboard.copy(text)
        except Exception as e:
            logger.warning(f"Clipboard write failed: {e}")

        ack = Acknowledgement(
            ack_id=next(self._ids),
            text=text,
            duration_seconds=self._duration,
        )
        try:
            self._notifier.notify(ack)
        except Exception as e:
            logger.warning(f"Acknowledgement {ack.ack_id} could not be shown: {e}")
            return

        self._active.append(ack)
        try:
            self._schedule(self._duration, lambda: self._dismiss(ack))
        except Exception as e:
            logger.warning(f"Could not schedule dismissal of acknowledgement {ack.ack_id}: {e}")

    def _dismiss(self, ack: Acknowledgement) -> None:
        if ack in self._active:
            self._active.remove(ack)
        try:
            self._notifier.dismiss(ack)
        except Exception as e:
            logger.warning(f"Acknowledgement {ack.ack_id} could not be dismissed: {e}")
