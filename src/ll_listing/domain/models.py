"""Domain models for ll_listing — pure dataclasses, no persistence dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.ll_common.enums import AdType


@dataclass
class CreativeEffect:
    id: str
    price_cents: int
    duration_days: int
    end_date: datetime
    is_active: bool = True


@dataclass
class Listing:
    id: str
    owner_id: str
    created_at: datetime
    expires_at: datetime
    title: str = ""
    store_id: str | None = None          # set for store-owned listings (no grace period)
    deleted_at: datetime | None = None
    archived_at: datetime | None = None
    is_archived: bool = False

    # Promotion; flags always equal flags_for(ad_type)
    ad_type: AdType = AdType.FREE
    is_premium: bool = False
    is_featured: bool = False
    is_vip: bool = False
    promotion_end_date: datetime | None = None
    grace_period_end_date: datetime | None = None
    grace_notice_sent: bool = False

    # Views
    views: int = 0
    purchased_views: int = 0
    target_views_for_featured: int | None = None
    featured_by_views: bool = False

    creative_effects: list[CreativeEffect] = field(default_factory=list)

    # Expiry thresholds (7/3/1) already notified for the current expires_at
    expiry_notices_sent: set[int] = field(default_factory=set)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_store_owned(self) -> bool:
        return self.store_id is not None

    @property
    def is_promoted(self) -> bool:
        return self.ad_type is not AdType.FREE

    @property
    def shows_as_featured(self) -> bool:
        """Featured through a promotion or through an unmet view target."""
        return self.is_featured or self.featured_by_views

    @property
    def unmet_view_target(self) -> int:
        """Views still owed on the active target; 0 when none is active."""
        if self.target_views_for_featured is None:
            return 0
        return max(0, self.target_views_for_featured - self.views)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
