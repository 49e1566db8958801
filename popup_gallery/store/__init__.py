"""
Listing store module.

Owns the in-memory listing snapshot and its asynchronous loading.
"""

from .listing_store import ListingStore, LoadResult, LoadStatus, StoreStatus

__all__ = ['ListingStore', 'LoadResult', 'LoadStatus', 'StoreStatus']
