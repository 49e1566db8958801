"""
Error handling module for PopUp Gallery.

Provides the listing source exception taxonomy, retry logic and recovery hints.
"""

from .errors import ListingSourceError, MalformedRecord, SourceUnavailable
from .error_handler import ErrorHandler, RetryConfig

__all__ = [
    'ErrorHandler',
    'RetryConfig',
    'ListingSourceError',
    'MalformedRecord',
    'SourceUnavailable',
]
