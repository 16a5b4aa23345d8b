"""Listing state transitions shared by the engines and the sweep.

Two orthogonal state machines live on one Listing:
  promotion: free -> promoted(type) -> [past end, in grace] -> free
  lifecycle: active -> expiring -> archived -> (reactivated) active
These helpers mutate a Listing in place; callers persist it.
"""

from datetime import datetime, timedelta

from src.ll_common.enums import AdType
from src.ll_listing.domain.models import Listing

PROMOTABLE_TYPES = frozenset({AdType.PREMIUM, AdType.FEATURED, AdType.VIP})


def flags_for(ad_type: AdType) -> tuple[bool, bool, bool]:
    """(is_premium, is_featured, is_vip) for an ad type. vip implies the other two."""
    return (
        ad_type in (AdType.PREMIUM, AdType.VIP),
        ad_type in (AdType.FEATURED, AdType.VIP),
        ad_type is AdType.VIP,
    )


def apply_promotion(
    listing: Listing,
    ad_type: AdType,
    promotion_end: datetime,
    grace_days: int,
) -> None:
    listing.ad_type = ad_type
    listing.is_premium, listing.is_featured, listing.is_vip = flags_for(ad_type)
    listing.promotion_end_date = promotion_end
    listing.grace_period_end_date = (
        None if listing.is_store_owned else promotion_end + timedelta(days=grace_days)
    )
    listing.grace_notice_sent = False


def clear_promotion(listing: Listing) -> None:
    listing.ad_type = AdType.FREE
    listing.is_premium = listing.is_featured = listing.is_vip = False
    listing.promotion_end_date = None
    listing.grace_period_end_date = None
    listing.grace_notice_sent = False


def set_view_target(listing: Listing, extra_views: int) -> int:
    """Add purchased (or carried-over) views and re-anchor the target on current views."""
    listing.purchased_views += extra_views
    listing.target_views_for_featured = listing.views + extra_views
    listing.featured_by_views = True
    return listing.target_views_for_featured


def clear_view_target(listing: Listing, *, reset_purchased: bool = False) -> None:
    listing.featured_by_views = False
    listing.target_views_for_featured = None
    if reset_purchased:
        listing.purchased_views = 0


def archive(listing: Listing, now: datetime) -> None:
    listing.is_archived = True
    listing.archived_at = now


def reactivate(listing: Listing, new_expires_at: datetime) -> None:
    listing.is_archived = False
    listing.archived_at = None
    listing.expires_at = new_expires_at
    listing.expiry_notices_sent = set()


def verify_listing_invariants(listing: Listing) -> None:
    """Raise AssertionError if the listing's promotion or view fields are inconsistent."""
    lid = listing.id
    assert (listing.is_premium, listing.is_featured, listing.is_vip) == flags_for(
        listing.ad_type
    ), f"listing {lid}: flags do not match ad_type={listing.ad_type.value}"
    assert (listing.promotion_end_date is not None) == listing.is_promoted, (
        f"listing {lid}: promotion_end_date={listing.promotion_end_date} "
        f"inconsistent with ad_type={listing.ad_type.value}"
    )
    if listing.grace_period_end_date is not None:
        assert listing.promotion_end_date is not None, f"listing {lid}: grace without promotion"
        assert not listing.is_store_owned, f"listing {lid}: store-owned listing has grace"
    assert listing.views >= 0, f"listing {lid}: views={listing.views}"
    assert listing.purchased_views >= 0, f"listing {lid}: purchased_views={listing.purchased_views}"
    if listing.featured_by_views:
        assert listing.target_views_for_featured is not None, (
            f"listing {lid}: featured_by_views without a target"
        )
