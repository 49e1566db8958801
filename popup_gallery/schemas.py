"""Wire record validation for fetched listings"""

import logging
from typing import Any, Iterable, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from popup_gallery.error_handling.errors import MalformedRecord
from popup_gallery.models import (
    ArtistDetails,
    Coordinate,
    Listing,
    SpaceDetails,
    new_listing_id,
)


logger = logging.getLogger(__name__)


class ListingRecord(BaseModel):
    """Listing as it appears in a JSON payload"""
    id: Optional[str] = None
    title: str
    description: str
    location: str
    image_url: str = Field(alias="imageURL")
    type: Literal["space", "artist"]
    owner_name: str = Field(alias="ownerName")
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    price: Optional[int] = Field(default=None, ge=0)
    space_size: Optional[str] = Field(default=None, alias="spaceSize")
    available_dates: Optional[str] = Field(default=None, alias="availableDates")
    art_style: Optional[str] = Field(default=None, alias="artStyle")

    model_config = ConfigDict(populate_by_name=True)

    def to_listing(self) -> Listing:
        """Build the immutable Listing, keeping only the fields its type allows"""
        if self.type == "space":
            if self.art_style is not None:
                logger.debug(f"Dropping artStyle from space record {self.id}")
            details = SpaceDetails(
                price_per_day=self.price,
                space_size=self.space_size,
                available_dates=self.available_dates,
            )
        else:
            dropped = [
                name for name, value in (
                    ("price", self.price),
                    ("spaceSize", self.space_size),
                    ("availableDates", self.available_dates),
                ) if value is not None
            ]
            if dropped:
                logger.debug(f"Dropping {dropped} from artist record {self.id}")
            details = ArtistDetails(art_style=self.art_style)

        return Listing(
            id=self.id or new_listing_id(),
            title=self.title,
            description=self.description,
            location=self.location,
            coordinate=Coordinate(latitude=self.latitude, longitude=self.longitude),
            image_url=self.image_url,
            owner_name=self.owner_name,
            details=details,
        )


def decode_listing(record: Any, index: Optional[int] = None) -> Listing:
    """Decode one wire record, raising MalformedRecord when it does not fit"""
    if not isinstance(record, dict):
        raise MalformedRecord(
            f"expected an object, got {type(record).__name__}", index=index, record=record
        )

    try:
        return ListingRecord.model_validate(record).to_listing()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        raise MalformedRecord(problems, index=index, record=record) from e


def decode_listings(records: Iterable[Any], source_name: str = "unknown") -> List[Listing]:
    """Decode a batch, skipping and logging malformed records and repeated ids"""
    listings = []
    seen_ids = set()
    skipped = 0

    for index, record in enumerate(records):
        try:
            listing = decode_listing(record, index=index)
            if listing.id in seen_ids:
                raise MalformedRecord(f"duplicate id {listing.id}", index=index, record=record)
        except MalformedRecord as e:
            skipped += 1
            logger.warning(f"Skipping malformed listing from {source_name}: {e}")
            continue
        seen_ids.add(listing.id)
        listings.append(listing)

    if skipped:
        logger.warning(f"Skipped {skipped} malformed record(s) from {source_name}")

    return listings
