"""
Main entry point and CLI for PopUp Gallery.

Loads listings from the configured source and prints the ones matching a
search text and category filter, the same way the explore screen lists them.
"""

import asyncio
import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence

from popup_gallery.config.app_config import SOURCE_KINDS, AppSettings, get_app_settings
from popup_gallery.error_handling.error_handler import ErrorHandler
from popup_gallery.models import FilterCriterion, Listing, SpaceDetails
from popup_gallery.sources import build_listing_source
from popup_gallery.store import ListingStore, LoadStatus


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_listing(listing: Listing) -> str:
    """
    Format a listing for console output.

    Args:
        listing: Listing to format

    Returns:
        Formatted multi-line string representation of the listing
    """
    lines = []

    icon = "🏛" if listing.is_space else "🎨"
    lines.append(f"{icon} {listing.title} [{listing.category.value}]")
    lines.append(f"   ID: {listing.id}")
    lines.append(f"   Location: {listing.location} "
                 f"({listing.coordinate.latitude:.4f}, {listing.coordinate.longitude:.4f})")
    lines.append(f"   Owner: {listing.owner_name}")

    details = listing.details
    if isinstance(details, SpaceDetails):
        if details.price_per_day is not None:
            lines.append(f"   Price: ${details.price_per_day}/day")
        if details.space_size:
            lines.append(f"   Size: {details.space_size}")
        if details.available_dates:
            lines.append(f"   Available: {details.available_dates}")
    elif details.art_style:
        lines.append(f"   Style: {details.art_style}")

    lines.append(f"   {listing.description}")
    lines.append(f"   Image: {listing.image_url}")
    lines.append("")

    return "\n".join(lines)


def format_results(listings: Sequence[Listing], stale: bool = False) -> str:
    """
    Format filtered listings for console output.

    Args:
        listings: Listings that survived the filter
        stale: Whether the listings come from a snapshot older than the last load

    Returns:
        Formatted string representation of all listings
    """
    if not listings:
        return "No listings found matching your criteria.\n"

    output = []
    output.append(f"\n{'='*60}\n")
    output.append(f"Found {len(listings)} listing(s)")
    if stale:
        output.append(" (stale, last refresh failed)")
    output.append(f"\n{'='*60}\n\n")

    for listing in listings:
        output.append(format_listing(listing))
        output.append("\n")

    output.append(f"{'='*60}\n")

    return "".join(output)


def apply_overrides(
    settings: AppSettings,
    source: Optional[str] = None,
    path: Optional[str] = None,
    url: Optional[str] = None
) -> AppSettings:
    """Return settings with command-line source options applied."""
    source_config = settings.source
    if source:
        source_config = replace(source_config, kind=source)
    if path:
        source_config = replace(source_config, path=path)
    if url:
        source_config = replace(source_config, url=url)
    return replace(settings, source=source_config)


async def run_explore(
    search_text: str = "",
    criterion: FilterCriterion = FilterCriterion.ALL,
    settings: Optional[AppSettings] = None,
    verbose: bool = False
) -> int:
    """
    Load listings and print the ones matching the search.

    Args:
        search_text: Case-insensitive text to look for
        criterion: Category filter
        settings: Application settings (default: from environment)
        verbose: Enable verbose logging output

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    try:
        settings = settings or get_app_settings()
        error_handler = ErrorHandler.from_config(settings.retry)
        source = build_listing_source(settings.source)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    store = ListingStore(
        source,
        error_handler=error_handler,
        fetch_timeout_seconds=settings.source.request_timeout_seconds
    )

    try:
        logger.info(f"Search parameters: text={search_text!r} filter={criterion.value}")
        start_time = datetime.now()

        result = await store.load()

        elapsed_time = (datetime.now() - start_time).total_seconds()

        if result.status is LoadStatus.FAILED:
            report = error_handler.describe_failure(result.error)
            print(f"\n❌ Could not load listings: {result.error}", file=sys.stderr)
            for suggestion in report['recovery_suggestions']:
                print(f"   - {suggestion}", file=sys.stderr)
            return 1

        matches = store.filtered_listings(criterion, search_text)
        print(format_results(matches, stale=store.is_stale))

        logger.info(f"Load completed in {elapsed_time:.2f} seconds")
        print(f"✅ {len(matches)} of {len(store.current_listings())} listing(s) shown")

        return 0

    finally:
        await store.aclose()


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="popup-gallery",
        description="Explore exhibition spaces and artists on PopUp Gallery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show every listing
  popup-gallery

  # Search for galleries among spaces only
  popup-gallery gallery --filter spaces

  # Load listings from a JSON file
  popup-gallery --source file --path listings.json
        """
    )

    parser.add_argument(
        "search_text",
        nargs="?",
        default="",
        help="Text to look for in title, location or description"
    )

    parser.add_argument(
        "--filter",
        choices=[criterion.value for criterion in FilterCriterion],
        default=FilterCriterion.ALL.value,
        help="Category filter (default: all)"
    )

    parser.add_argument(
        "--source",
        choices=SOURCE_KINDS,
        default=None,
        help="Listing source (default: LISTING_SOURCE or sample)"
    )

    parser.add_argument(
        "--path",
        default=None,
        help="JSON file to read when --source file"
    )

    parser.add_argument(
        "--url",
        default=None,
        help="Endpoint to fetch when --source http"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = apply_overrides(
            get_app_settings(), source=args.source, path=args.path, url=args.url
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.getLogger().setLevel(settings.log_level)

    try:
        return asyncio.run(
            run_explore(
                search_text=args.search_text,
                criterion=FilterCriterion(args.filter),
                settings=settings,
                verbose=args.verbose
            )
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\n\n⚠️  Interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
