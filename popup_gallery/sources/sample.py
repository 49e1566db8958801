"""
Built-in sample listings.

Stands in for a remote listings service during development and demos.
"""

from typing import List, Optional, Sequence

from popup_gallery.models import (
    ArtistDetails,
    Coordinate,
    Listing,
    SpaceDetails,
)
from popup_gallery.sources.base import ListingSource


SAMPLE_LISTINGS = (
    Listing(
        id="8f7c1f0e-5b9a-4c55-9a63-2f1d8a6b3e01",
        title="Modern Gallery Space",
        description="Beautiful modern space perfect for art exhibitions",
        location="Downtown SF",
        coordinate=Coordinate(latitude=37.7749, longitude=-122.4194),
        image_url="https://example.com/space1.jpg",
        owner_name="Sarah Johnson",
        details=SpaceDetails(
            price_per_day=150,
            space_size="1200 sq ft",
            available_dates="March 15-30",
        ),
    ),
    Listing(
        id="2c4e9d7a-0f36-4b8e-b1c2-7e5a9d4f6c02",
        title="Contemporary Paintings",
        description="Abstract and contemporary artwork looking for exhibition space",
        location="Mission District",
        coordinate=Coordinate(latitude=37.7649, longitude=-122.4094),
        image_url="https://example.com/art1.jpg",
        owner_name="Alex Chen",
        details=ArtistDetails(art_style="Contemporary Abstract"),
    ),
)


class SampleListingSource(ListingSource):
    """Serves a fixed in-memory listing collection."""

    name = "sample"

    def __init__(self, listings: Sequence[Listing] = SAMPLE_LISTINGS):
        self._listings = tuple(listings)

    async def fetch_listings(self, timeout_seconds: Optional[float] = None) -> List[Listing]:
        return list(self._listings)
