"""Base interface for listing data sources."""

from abc import ABC, abstractmethod
from typing import List, Optional

from popup_gallery.models import Listing


class ListingSource(ABC):
    """Produces the listing collection a store loads.

    Implementations raise SourceUnavailable when the fetch itself fails and
    skip individual malformed records instead of failing the batch.
    """

    name: str = "source"

    @abstractmethod
    async def fetch_listings(self, timeout_seconds: Optional[float] = None) -> List[Listing]:
        """Fetch the full listing collection, in source order."""

    async def close(self) -> None:
        """Release any resources held by the source."""
