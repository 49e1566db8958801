"""
Listing filter implementation for the explore screen.

This module provides filtering of marketplace listings by category and by a
free-text search over the listing's title, location and description.
"""

from typing import List, Sequence

from popup_gallery.models import FilterCriterion, Listing


# Fields the search text is matched against. Owner name is deliberately absent.
SEARCHABLE_FIELDS = ('title', 'location', 'description')


class ListingFilter:
    """Filters marketplace listings by category and search text.

    Filtering is pure: the input sequence is never modified and identical
    inputs always produce identical output, so the filter is safe to run on
    every keystroke without memoization.
    """

    def filter_by_category(
        self,
        listings: Sequence[Listing],
        criterion: FilterCriterion
    ) -> List[Listing]:
        """Filter listings by category criterion.

        Args:
            listings: Listings to filter
            criterion: Which categories to keep

        Returns:
            Listings whose category passes the criterion, in original order
        """
        if criterion is FilterCriterion.ALL:
            return list(listings)

        return [listing for listing in listings if criterion.admits(listing.category)]

    def filter_by_text(
        self,
        listings: Sequence[Listing],
        search_text: str
    ) -> List[Listing]:
        """Filter listings by case-insensitive substring search.

        A listing matches when the search text occurs anywhere inside its
        title, location or description. An empty search text keeps everything.

        Args:
            listings: Listings to filter
            search_text: Text to look for (not trimmed)

        Returns:
            Listings matching the search text, in original order
        """
        if not search_text:
            return list(listings)

        needle = search_text.casefold()
        filtered = []

        for listing in listings:
            if any(needle in getattr(listing, name).casefold() for name in SEARCHABLE_FIELDS):
                filtered.append(listing)

        return filtered

    def apply(
        self,
        listings: Sequence[Listing],
        criterion: FilterCriterion = FilterCriterion.ALL,
        search_text: str = ""
    ) -> List[Listing]:
        """Apply the category step, then the text step.

        Args:
            listings: Full listing collection
            criterion: Category criterion
            search_text: Search text, possibly empty

        Returns:
            Surviving listings in their original relative order
        """
        by_category = self.filter_by_category(listings, criterion)
        return self.filter_by_text(by_category, search_text)


def filter_listings(
    listings: Sequence[Listing],
    criterion: FilterCriterion = FilterCriterion.ALL,
    search_text: str = ""
) -> List[Listing]:
    """Module-level shortcut for ``ListingFilter().apply``."""
    return ListingFilter().apply(listings, criterion, search_text)
