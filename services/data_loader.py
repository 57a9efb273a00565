"""
Data loader: asynchronous fetch lifecycle for one stamp card.

Exactly one fetch is authoritative at a time - the most recently requested
one. Each load() bumps a request generation; when a fetch completes, its
result is applied only if its generation is still current. Results of
superseded fetches are dropped, so a slow response for an old identifier
can never overwrite the record of a newer one.

Concurrency model:
    - Runs on a single asyncio event loop; no locks
    - The awaited fetch is the only suspension point
    - Cancelling the awaiting task is allowed; the generation check alone
      is enough for correctness

Usage:
    loader = DataLoader(client.fetch_stamp_async)

    state = await loader.load("A123")
    if state.is_loaded and loader.is_current(state.generation):
        ...
"""

from __future__ import annotations

from typing import Awaitable, Callable, List, Optional

from core.exceptions import FetchError
from logging_config import get_logger
from models.card_state import LoadState
from models.stamp import StampRecord


# Module logger
logger = get_logger(__name__)

# Shown to the user for any fetch failure
FETCH_FAILED_MESSAGE = "Failed to fetch stamp information."

FetchFunc = Callable[[str], Awaitable[StampRecord]]
StateListener = Callable[[LoadState], None]


class DataLoader:
    """
    Owns the LoadState of one card.

    There is no retry and no cache: a failure is terminal for that
    identifier until load() is called again, and every load() fetches.

    Attributes:
        state: Current LoadState (never None)
        generation: Generation of the most recent request
    """

    def __init__(
        self,
        fetch: FetchFunc,
        on_change: Optional[StateListener] = None
    ):
        """
        Initialize the loader.

        Args:
            fetch: Coroutine function returning a StampRecord or raising FetchError
            on_change: Optional listener called after every applied transition
        """
        self._fetch = fetch
        self._generation = 0
        self._state = LoadState.create_idle()
        self._listeners: List[StateListener] = []
        if on_change is not None:
            self._listeners.append(on_change)

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        """Whether generation is still the authoritative request."""
        return generation == self._generation

    async def load(self, stamp_id: str) -> LoadState:
        """
        Start a fetch for stamp_id and wait for it.

        The state becomes LOADING immediately. When the fetch finishes the
        result is applied only if no newer request was made meanwhile.

        Args:
            stamp_id: Identifier to load

        Returns:
            The state this request produced. For a superseded request this
            is the state it would have produced; it was NOT applied, which
            callers can detect with is_current(state.generation).
        """
        self._generation += 1
        generation = self._generation
        self._apply(LoadState.create_loading(stamp_id, generation))
        logger.debug(f"Fetch started for {stamp_id} (generation {generation})")

        try:
            record = await self._fetch(stamp_id)
            result = LoadState.create_loaded(record, generation)
        except FetchError as e:
            logger.warning(f"Fetch failed for {stamp_id}: {e}")
            result = LoadState.create_failed(stamp_id, generation, FETCH_FAILED_MESSAGE)
        except Exception as e:
            logger.error(f"Unexpected error fetching {stamp_id}: {e}", exc_info=True)
            result = LoadState.create_failed(stamp_id, generation, FETCH_FAILED_MESSAGE)

        if not self.is_current(generation):
            logger.debug(
                f"Dropping stale result for {stamp_id} "
                f"(generation {generation}, current {self._generation})"
            )
            return result

        self._apply(result)
        if result.is_loaded:
            logger.info(
                f"Loaded {stamp_id}: {result.record.content_type or '<no type>'}, "
                f"{len(result.record.offers)} dispensers"
            )
        return result

    def discard(self) -> None:
        """
        Forget the current record and any outstanding fetch (card unmounted).

        Bumping the generation makes every in-flight result stale.
        """
        self._generation += 1
        self._apply(LoadState.create_idle(self._generation))
        logger.debug(f"Loader discarded (generation {self._generation})")

    def _apply(self, state: LoadState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
