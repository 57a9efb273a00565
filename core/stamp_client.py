"""
HTTP client for the stamp data source.

Fetches one stamp (metadata, inline payload and dispensers) per call and
turns the response into an immutable StampRecord.

Blocking vs. async:
    - fetch_stamp() is a plain blocking requests call
    - fetch_stamp_async() runs it in a worker thread so the card's event
      loop keeps processing interactions while the fetch is outstanding
    - Cancelling the awaiting task does NOT abort the HTTP request; the
      data loader drops the late result instead

Usage:
    client = StampAPIClient("https://stampchain.io/api/v2/stamps", timeout_seconds=10)

    record = client.fetch_stamp("A1234567890")              # blocking
    record = await client.fetch_stamp_async("A1234567890")  # inside the event loop
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import quote

import requests

from .exceptions import FetchError, MalformedPayloadError, StampNotFoundError
from models.stamp import StampRecord


class StampAPIClient:
    """
    Wrapper around the stamp REST endpoint.

    Maps transport problems onto the FetchError family:
    - connection errors, timeouts, 5xx    -> FetchError
    - 404                                 -> StampNotFoundError
    - non-JSON body or unexpected shape   -> MalformedPayloadError

    Attributes:
        base_url: Endpoint prefix; the stamp id is appended as a path segment
        timeout_seconds: Per-request timeout
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Endpoint prefix (e.g., https://stampchain.io/api/v2/stamps)
            timeout_seconds: Per-request timeout
            session: Optional requests.Session (tests inject a mock)
            logger: Logger instance (creates default if not provided)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required - set STAMP_API_BASE_URL")

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger("stamp_card.core.stamp_client")

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def url_for(self, stamp_id: str) -> str:
        """Endpoint URL for one stamp."""
        return f"{self._base_url}/{quote(stamp_id, safe='')}"

    def fetch_stamp(self, stamp_id: str) -> StampRecord:
        """
        Fetch and parse one stamp record.

        Args:
            stamp_id: Opaque identifier (cpid)

        Returns:
            StampRecord with offers in fetch order

        Raises:
            StampNotFoundError: Data source returned 404
            MalformedPayloadError: Response is not a stamp record
            FetchError: Any other transport or HTTP failure
        """
        url = self.url_for(stamp_id)
        self._logger.debug(f"GET {url}")

        try:
            response = self._session.get(
                url,
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        except requests.Timeout:
            raise FetchError(stamp_id, f"timed out after {self._timeout:.1f}s")
        except requests.RequestException as e:
            raise FetchError(stamp_id, f"transport error: {e}")

        if response.status_code == 404:
            raise StampNotFoundError(stamp_id)

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise FetchError(
                stamp_id,
                f"HTTP {response.status_code}",
                {"error": str(e)},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedPayloadError(stamp_id, f"invalid JSON: {e}")

        record = StampRecord.from_api_data(stamp_id, body)
        self._logger.debug(
            f"Fetched {stamp_id}: {record.content_type or '<no type>'}, "
            f"{len(record.offers)} dispensers"
        )
        return record

    async def fetch_stamp_async(self, stamp_id: str) -> StampRecord:
        """Awaitable fetch_stamp(); the blocking call runs in a worker thread."""
        return await asyncio.to_thread(self.fetch_stamp, stamp_id)

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()
