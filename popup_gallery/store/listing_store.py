"""
In-memory listing store shared by the map and list presentations.

The store owns the current listing collection as an immutable snapshot. A load
replaces the whole snapshot at once, so readers never see a partial update and
no locking is needed on a single event loop.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from popup_gallery.error_handling.error_handler import ErrorHandler
from popup_gallery.error_handling.errors import ListingSourceError
from popup_gallery.filtering import ListingFilter
from popup_gallery.models import FilterCriterion, Listing
from popup_gallery.sources.base import ListingSource


logger = logging.getLogger(__name__)


SnapshotListener = Callable[[Tuple[Listing, ...]], None]


def _caller_cancelling() -> bool:
    """True when the running task has a pending cancel request (Python 3.11+)."""
    task = asyncio.current_task()
    cancelling = getattr(task, "cancelling", None)
    return cancelling is not None and cancelling() > 0


class LoadStatus(str, Enum):
    """Outcome of a single load call."""
    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"
    SUPERSEDED = "superseded"


class StoreStatus(str, Enum):
    """What the store currently holds, as seen by a presentation layer."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class LoadResult:
    """Result of ``ListingStore.load``.

    Attributes:
        status: How the load ended
        listings: Snapshot installed by this load, empty unless it succeeded
        error: Source failure when status is FAILED
    """
    status: LoadStatus
    listings: Tuple[Listing, ...] = ()
    error: Optional[ListingSourceError] = None

    @property
    def ok(self) -> bool:
        return self.status in (LoadStatus.LOADED, LoadStatus.EMPTY)


class ListingStore:
    """
    Holds the current listing collection and loads it from a source.

    Only one load is ever allowed to write: starting a load cancels the fetch
    of any load still in flight, and the superseded caller gets a SUPERSEDED
    result instead of overwriting the newer snapshot.

    Attributes:
        is_stale: True when the last load failed and the snapshot predates it
        last_error: Failure of the last load, cleared by the next success
    """

    def __init__(
        self,
        source: ListingSource,
        error_handler: Optional[ErrorHandler] = None,
        listing_filter: Optional[ListingFilter] = None,
        fetch_timeout_seconds: Optional[float] = None
    ):
        """
        Initialize the store.

        Args:
            source: Where listings are fetched from
            error_handler: Retry policy for fetches (default: ErrorHandler())
            listing_filter: Filter used by filtered_listings
            fetch_timeout_seconds: Timeout for the first fetch attempt
        """
        self._source = source
        self._error_handler = error_handler or ErrorHandler()
        self._filter = listing_filter or ListingFilter()
        self._fetch_timeout_seconds = fetch_timeout_seconds

        self._listings: Tuple[Listing, ...] = ()
        self._status = StoreStatus.IDLE
        self._settled_status = StoreStatus.IDLE
        self._generation = 0
        self._fetch_task: Optional[asyncio.Task] = None
        self._listeners: List[SnapshotListener] = []

        self.is_stale = False
        self.last_error: Optional[ListingSourceError] = None

    @property
    def source(self) -> ListingSource:
        return self._source

    @property
    def status(self) -> StoreStatus:
        return self._status

    @property
    def is_loading(self) -> bool:
        return self._status is StoreStatus.LOADING

    def current_listings(self) -> Tuple[Listing, ...]:
        """Return the current snapshot in insertion order, unfiltered."""
        return self._listings

    def filtered_listings(
        self,
        criterion: FilterCriterion = FilterCriterion.ALL,
        search_text: str = ""
    ) -> List[Listing]:
        """Apply the listing filter to the current snapshot."""
        return self._filter.apply(self._listings, criterion, search_text)

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a callback invoked with every newly installed snapshot.

        Returns:
            Callable that unregisters the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def load(self) -> LoadResult:
        """
        Fetch listings from the source and replace the snapshot wholesale.

        Returns:
            LoadResult describing how this particular load ended

        Raises:
            asyncio.CancelledError: If the caller itself is cancelled
        """
        self._cancel_in_flight()
        self._generation += 1
        generation = self._generation
        self._status = StoreStatus.LOADING

        logger.info(f"Loading listings from {self._source.name} source (load #{generation})")

        fetch = asyncio.ensure_future(self._fetch())
        self._fetch_task = fetch

        try:
            listings = await fetch
        except asyncio.CancelledError:
            if generation != self._generation:
                if _caller_cancelling():
                    logger.info(f"Load #{generation} cancelled while superseded")
                    raise
                return self._superseded(generation)
            self._status = self._settled_status
            logger.info(f"Load #{generation} cancelled")
            raise
        except ListingSourceError as e:
            if generation != self._generation:
                return self._superseded(generation)
            return self._install_failure(e)
        except Exception:
            if generation == self._generation:
                self._status = self._settled_status
            raise
        finally:
            if self._fetch_task is fetch:
                self._fetch_task = None

        if generation != self._generation:
            return self._superseded(generation)
        return self._install(listings)

    async def aclose(self) -> None:
        """Cancel any in-flight load and close the source."""
        self._cancel_in_flight()
        await self._source.close()

    async def _fetch(self) -> List[Listing]:
        return await self._error_handler.retry_with_backoff(
            self._source.fetch_listings,
            timeout_seconds=self._fetch_timeout_seconds
        )

    def _cancel_in_flight(self) -> None:
        if self._fetch_task is not None and not self._fetch_task.done():
            logger.debug(f"Cancelling in-flight fetch for load #{self._generation}")
            self._fetch_task.cancel()

    def _superseded(self, generation: int) -> LoadResult:
        logger.info(f"Load #{generation} superseded by load #{self._generation}")
        return LoadResult(status=LoadStatus.SUPERSEDED)

    def _install(self, listings: Sequence[Listing]) -> LoadResult:
        snapshot = tuple(listings)
        self._listings = snapshot
        self.is_stale = False
        self.last_error = None

        if snapshot:
            self._set_settled(StoreStatus.LOADED)
            result = LoadResult(status=LoadStatus.LOADED, listings=snapshot)
        else:
            self._set_settled(StoreStatus.EMPTY)
            result = LoadResult(status=LoadStatus.EMPTY)

        logger.info(f"Loaded {len(snapshot)} listing(s) from {self._source.name} source")
        self._notify(snapshot)
        return result

    def _install_failure(self, error: ListingSourceError) -> LoadResult:
        self.is_stale = True
        self.last_error = error
        self._set_settled(StoreStatus.FAILED)

        logger.error(
            f"Loading listings failed: {error}. "
            f"Keeping {len(self._listings)} stale listing(s)"
        )
        return LoadResult(status=LoadStatus.FAILED, error=error)

    def _set_settled(self, status: StoreStatus) -> None:
        self._status = status
        self._settled_status = status

    def _notify(self, snapshot: Tuple[Listing, ...]) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Snapshot listener {listener!r} failed")
