"""
Listing source backed by a local JSON file.

The file holds either a JSON array of listing records or an object with a
``listings`` array.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from popup_gallery.error_handling.errors import SourceUnavailable
from popup_gallery.models import Listing
from popup_gallery.schemas import decode_listings
from popup_gallery.sources.base import ListingSource


logger = logging.getLogger(__name__)


def extract_records(payload: Any, source_name: str) -> List[Any]:
    """Pull the record list out of a decoded JSON payload.

    Raises:
        SourceUnavailable: If the payload has no listing array
    """
    if isinstance(payload, dict):
        payload = payload.get('listings')

    if not isinstance(payload, list):
        raise SourceUnavailable(source_name, "unexpected JSON payload, expected a listings array")

    return payload


class JsonFileListingSource(ListingSource):
    """Reads listings from a JSON file on disk."""

    name = "file"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def fetch_listings(self, timeout_seconds: Optional[float] = None) -> List[Listing]:
        logger.debug(f"Reading listings from {self.path}")
        payload = await asyncio.to_thread(self._read_payload)
        records = extract_records(payload, self.name)
        listings = decode_listings(records, source_name=str(self.path))
        logger.info(f"Read {len(listings)} listing(s) from {self.path}")
        return listings

    def _read_payload(self) -> Any:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceUnavailable(self.name, f"cannot read file {self.path}: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise SourceUnavailable(self.name, f"invalid JSON in {self.path}: {e}") from e
