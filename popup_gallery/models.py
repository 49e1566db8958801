"""
Data models for PopUp Gallery.

This module defines the core data structures used throughout the application:
listings for exhibition spaces and artists, and the criteria used to filter them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union
import uuid


class ListingCategory(str, Enum):
    """Marketplace partition a listing belongs to."""
    SPACE = "space"
    ARTIST = "artist"


class FilterCriterion(str, Enum):
    """Category filter selected by the user on the explore screen."""
    ALL = "all"
    SPACES_ONLY = "spaces"
    ARTISTS_ONLY = "artists"

    def admits(self, category: ListingCategory) -> bool:
        """Check whether listings of the given category pass this criterion.

        Args:
            category: Category of the listing being tested

        Returns:
            True if the listing should be kept by the category step
        """
        if self is FilterCriterion.SPACES_ONLY:
            return category is ListingCategory.SPACE
        if self is FilterCriterion.ARTISTS_ONLY:
            return category is ListingCategory.ARTIST
        return True


@dataclass(frozen=True)
class Coordinate:
    """Geographic coordinate in floating point degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SpaceDetails:
    """Details only a rentable exhibition space carries.

    Attributes:
        price_per_day: Rental price in currency units per day
        space_size: Free-text size, e.g. "1200 sq ft"
        available_dates: Free-text availability, e.g. "March 15-30"
    """
    category: ClassVar[ListingCategory] = ListingCategory.SPACE

    price_per_day: Optional[int] = None
    space_size: Optional[str] = None
    available_dates: Optional[str] = None


@dataclass(frozen=True)
class ArtistDetails:
    """Details only an artist looking for space carries."""
    category: ClassVar[ListingCategory] = ListingCategory.ARTIST

    art_style: Optional[str] = None


ListingDetails = Union[SpaceDetails, ArtistDetails]


def new_listing_id() -> str:
    """Generate an opaque identifier for a newly created listing."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Listing:
    """Represents a marketplace listing.

    The category is derived from the details variant, so a space listing can
    never carry an art style and an artist listing can never carry a price.

    Attributes:
        id: Unique, opaque listing identifier
        title: Listing title
        description: Longer free-text description
        location: Free-text place name, e.g. "Downtown SF"
        coordinate: Where the listing is pinned on the map
        image_url: URL of the listing's primary image
        owner_name: Display name of the listing owner
        details: Space or artist specific fields
    """
    title: str
    description: str
    location: str
    coordinate: Coordinate
    image_url: str
    owner_name: str
    details: ListingDetails
    id: str = field(default_factory=new_listing_id)

    @property
    def category(self) -> ListingCategory:
        return self.details.category

    @property
    def is_space(self) -> bool:
        return self.category is ListingCategory.SPACE

    @property
    def is_artist(self) -> bool:
        return self.category is ListingCategory.ARTIST

    def to_dict(self) -> dict:
        """Convert listing to its wire dictionary for JSON serialization.

        Keys follow the mobile client's encoding: camelCase names, the
        coordinate flattened into latitude/longitude, and category-specific
        keys only when they hold a value.

        Returns:
            Dictionary representation of the listing
        """
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location,
            'imageURL': self.image_url,
            'type': self.category.value,
            'ownerName': self.owner_name,
            'latitude': self.coordinate.latitude,
            'longitude': self.coordinate.longitude,
        }

        if isinstance(self.details, SpaceDetails):
            optional = {
                'price': self.details.price_per_day,
                'spaceSize': self.details.space_size,
                'availableDates': self.details.available_dates,
            }
        else:
            optional = {'artStyle': self.details.art_style}

        data.update({key: value for key, value in optional.items() if value is not None})
        return data
