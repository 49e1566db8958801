"""
Exception taxonomy for listing data sources.

An empty fetch is not an error: it is reported as an empty load result.
"""

from typing import Any, Optional


class ListingSourceError(Exception):
    """Base class for failures while producing listings."""


class SourceUnavailable(ListingSourceError):
    """The backing data fetch failed (network, IO, unreadable payload).

    Recoverable: callers should retry or keep showing the stale collection.
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Listing source '{source}' unavailable: {reason}")


class MalformedRecord(ListingSourceError):
    """A fetched record could not be decoded into a Listing."""

    def __init__(self, reason: str, index: Optional[int] = None, record: Any = None):
        self.reason = reason
        self.index = index
        self.record = record
        where = f"record {index}" if index is not None else "record"
        super().__init__(f"Malformed {where}: {reason}")
