"""
Listing data sources.

Provides the sources a ListingStore can load from: built-in sample data, a
local JSON file, or a remote HTTP endpoint.
"""

from popup_gallery.config.app_config import SourceConfig

from .base import ListingSource
from .file import JsonFileListingSource
from .http import HttpListingSource
from .sample import SAMPLE_LISTINGS, SampleListingSource


def build_listing_source(config: SourceConfig) -> ListingSource:
    """Create the listing source selected by configuration.

    Raises:
        ValueError: If the selected source is missing its path or URL
    """
    if config.kind == "file":
        if not config.path:
            raise ValueError("Listings file not configured. Set LISTINGS_PATH in .env")
        return JsonFileListingSource(config.path)

    if config.kind == "http":
        return HttpListingSource(config.url)

    return SampleListingSource()


__all__ = [
    'ListingSource',
    'JsonFileListingSource',
    'HttpListingSource',
    'SampleListingSource',
    'SAMPLE_LISTINGS',
    'build_listing_source',
]
