"""
Filtering module for marketplace listings.

This module provides functionality to filter listings by category and by
free-text search.
"""

from .listing_filter import SEARCHABLE_FIELDS, ListingFilter, filter_listings

__all__ = ['ListingFilter', 'SEARCHABLE_FIELDS', 'filter_listings']
