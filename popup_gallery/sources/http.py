"""
HTTP listing source - fetches listing records from a remote JSON endpoint.

Transport failures, timeouts and unexpected responses surface as
SourceUnavailable so the store can retry and fall back to its stale snapshot.
"""

import asyncio
import logging
from typing import List, Optional

import aiohttp

from popup_gallery.error_handling.errors import SourceUnavailable
from popup_gallery.models import Listing
from popup_gallery.schemas import decode_listings
from popup_gallery.sources.base import ListingSource
from popup_gallery.sources.file import extract_records


logger = logging.getLogger(__name__)


class HttpListingSource(ListingSource):
    """
    Listing source for a remote listings endpoint.

    The source owns its aiohttp session unless one is injected, in which case
    the caller is responsible for closing it.
    """

    name = "http"

    DEFAULT_TIMEOUT_SECONDS = 10.0

    def __init__(self, url: str, session: Optional[aiohttp.ClientSession] = None):
        if not url:
            raise ValueError("Listings URL not configured. Set LISTINGS_URL in .env")

        self.url = url
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the session if this source created it"""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _ensure_session(self):
        """Ensure we have an open session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

    async def fetch_listings(self, timeout_seconds: Optional[float] = None) -> List[Listing]:
        await self._ensure_session()

        timeout = aiohttp.ClientTimeout(total=timeout_seconds or self.DEFAULT_TIMEOUT_SECONDS)
        headers = {"Accept": "application/json"}

        try:
            async with self._session.get(self.url, headers=headers, timeout=timeout) as response:
                logger.debug(f"GET {self.url} -> {response.status}")
                if response.status != 200:
                    raise SourceUnavailable(self.name, f"unexpected HTTP status {response.status}")

                try:
                    payload = await response.json()
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise SourceUnavailable(self.name, f"response is not valid JSON: {e}") from e

        except asyncio.TimeoutError as e:
            raise SourceUnavailable(self.name, f"request timed out after {timeout.total}s") from e
        except aiohttp.ClientError as e:
            raise SourceUnavailable(self.name, f"connection error: {e}") from e

        records = extract_records(payload, self.name)
        listings = decode_listings(records, source_name=self.url)
        logger.info(f"Fetched {len(listings)} listing(s) from {self.url}")
        return listings
