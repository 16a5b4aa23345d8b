"""Listing precondition checks shared by the purchase engines.

Each check raises the coded error for its failure kind and mutates nothing.
"""

from datetime import datetime

from src.ll_common.errors import (
    InvalidDurationError,
    ListingArchivedError,
    ListingDeletedError,
    ListingExpiredError,
    ListingNotFoundError,
)
from src.ll_listing.domain.models import Listing
from src.ll_listing.domain.repository import ListingRepositoryProtocol

MAX_DURATION_DAYS = 365


async def load_listing(repo: ListingRepositoryProtocol, listing_id: str) -> Listing:
    listing = await repo.get_listing(listing_id)
    if listing is None:
        raise ListingNotFoundError(listing_id)
    return listing


def check_not_deleted(listing: Listing) -> None:
    if listing.is_deleted:
        raise ListingDeletedError(listing.id)


def check_active(listing: Listing, now: datetime) -> None:
    """Not deleted, not archived, and not past its own expiry."""
    check_not_deleted(listing)
    if listing.is_archived:
        raise ListingArchivedError(listing.id)
    if listing.is_expired(now):
        raise ListingExpiredError(listing.id)


def check_duration(duration_days: object) -> int:
    if (
        isinstance(duration_days, bool)
        or not isinstance(duration_days, int)
        or not 0 < duration_days <= MAX_DURATION_DAYS
    ):
        raise InvalidDurationError(duration_days)
    return duration_days
