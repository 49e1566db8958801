"""PopUp Gallery: listing core for a marketplace connecting artists with exhibition spaces."""

from popup_gallery.filtering import ListingFilter, filter_listings
from popup_gallery.models import (
    ArtistDetails,
    Coordinate,
    FilterCriterion,
    Listing,
    ListingCategory,
    SpaceDetails,
)
from popup_gallery.store import ListingStore, LoadResult, LoadStatus, StoreStatus

__version__ = "0.1.0"

__all__ = [
    'ArtistDetails',
    'Coordinate',
    'FilterCriterion',
    'Listing',
    'ListingCategory',
    'ListingFilter',
    'ListingStore',
    'LoadResult',
    'LoadStatus',
    'SpaceDetails',
    'StoreStatus',
    'filter_listings',
]
