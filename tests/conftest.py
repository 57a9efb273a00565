"""
Shared fixtures for StampCard tests.

FakeStampSource stands in for the HTTP client: records and errors are set
per identifier, and a fetch can be held open with an asyncio.Event to
reproduce identifier changes while a request is in flight.
"""

import asyncio
import base64
import io
from decimal import Decimal
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from PIL import Image

from models.stamp import Offer, StampRecord
from services.catalog import CatalogLookup
from services.clipboard_notifier import ClipboardNotifier


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (24, 24), (255, 165, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


PNG_BYTES = _png_bytes()
PNG_BASE64 = base64.b64encode(PNG_BYTES).decode("ascii")

HTML_PAYLOAD = "<html><body><script>window.top.location = 'https://evil.example';</script>pepe</body></html>"
HTML_BASE64 = base64.b64encode(HTML_PAYLOAD.encode("utf-8")).decode("ascii")


def make_offer(source: str, rate: str, remaining: int = 1, total: int = 10) -> Offer:
    return Offer(source=source, rate=Decimal(rate), remaining=remaining, total=total)


def make_record(
    stamp_id: str = "A111",
    content_type: str = "image/png",
    payload_base64: Optional[str] = PNG_BASE64,
    url: Optional[str] = None,
    offers=(),
) -> StampRecord:
    return StampRecord(
        stamp_id=stamp_id,
        content_type=content_type,
        payload_base64=payload_base64,
        url=url,
        offers=tuple(offers),
    )


def api_payload(
    cpid: str = "A111",
    mimetype: str = "image/png",
    base64_payload: str = PNG_BASE64,
    url: str = "https://stampchain.io/stamps/A111.png",
    dispensers=None,
) -> dict:
    """Response body in the stamp API's shape."""
    return {
        "data": {
            "stamp": {
                "cpid": cpid,
                "stamp_mimetype": mimetype,
                "stamp_base64": base64_payload,
                "stamp_url": url,
            },
            "dispensers": dispensers if dispensers is not None else [],
        }
    }


class FakeStampSource:
    """Async fetch function with per-identifier records, errors and gates."""

    def __init__(self) -> None:
        self.records: Dict[str, StampRecord] = {}
        self.errors: Dict[str, Exception] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []

    def hold(self, stamp_id: str) -> asyncio.Event:
        """Keep fetches for stamp_id pending until the returned event is set."""
        gate = asyncio.Event()
        self.gates[stamp_id] = gate
        return gate

    async def fetch(self, stamp_id: str) -> StampRecord:
        self.calls.append(stamp_id)
        gate = self.gates.get(stamp_id)
        if gate is not None:
            await gate.wait()
        if stamp_id in self.errors:
            raise self.errors[stamp_id]
        return self.records[stamp_id]


class RecordingClipboard:
    def __init__(self, fail: bool = False) -> None:
        self.texts: List[str] = []
        self.fail = fail

    def copy(self, text: str) -> None:
        if self.fail:
            raise OSError("clipboard unavailable")
        self.texts.append(text)


class RecordingNotifier:
    def __init__(self) -> None:
        self.shown = []
        self.dismissed = []

    def notify(self, ack) -> None:
        self.shown.append(ack)

    def dismiss(self, ack) -> None:
        self.dismissed.append(ack)


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self) -> None:
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def fire(self, index: int) -> None:
        _, callback = self.pending[index]
        callback()


# Fixtures

@pytest.fixture
def source():
    return FakeStampSource()


@pytest.fixture
def clipboard():
    return RecordingClipboard()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def clipboard_notifier(clipboard, notifier, scheduler):
    return ClipboardNotifier(clipboard, notifier, duration_seconds=3.0, scheduler=scheduler)


@pytest.fixture
def catalog():
    return CatalogLookup.from_rows([
        {"cpid": "A111", "chapter": "1", "page": "4", "artist": "Rare Scrilla"},
        {"cpid": "B222", "chapter": "2", "page": "9", "artist": "Pepe Dealer"},
    ])


@pytest.fixture
def three_offer_record():
    """image/png with rates [0.002, 0.0015, 0.003] in fetch order."""
    return make_record(
        stamp_id="A111",
        offers=[
            make_offer("bc1qmiddle000000000000000000000000000000", "0.002", 3, 10),
            make_offer("bc1qcheap0000000000000000000000000000000", "0.0015", 1, 5),
            make_offer("bc1qpricey000000000000000000000000000000", "0.003", 7, 7),
        ],
    )


@pytest.fixture
def mock_session():
    """requests.Session stand-in; set mock_session.get.return_value per test."""
    return MagicMock()


def json_response(body, status_code: int = 200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    response.raise_for_status = MagicMock()
    return response
