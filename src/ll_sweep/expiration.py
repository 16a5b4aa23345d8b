"""ExpirationSweep — time-driven transitions for every listing.

Per non-deleted listing, under its lock:
  1. days_remaining = ceil((expires_at - now) / 1 day)
  2. days_remaining <= 0: carry any unmet view target to the owner's unused
     views, clear view placement, auto-archive (terminal, not a delete)
  3. days_remaining in {7, 3, 1}: one tiered renewal notice per threshold;
     sent thresholds are stored on the listing so re-runs never repeat them
  4. promotion past its end: demote immediately for store-owned listings or
     when no grace date is set, otherwise keep it through the grace window
  5. deactivate creative effects whose end date has passed

Notifications go out after the listing is saved. A failure on one listing
is logged and the run moves on to the next.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from src.ll_common.datetime_utils import Clock, days_until, utc_now
from src.ll_common.locks import KeyedLocks
from src.ll_listing.domain.models import Listing
from src.ll_listing.domain.repository import ListingRepositoryProtocol
from src.ll_listing.domain.state import (
    archive,
    clear_promotion,
    clear_view_target,
    verify_listing_invariants,
)
from src.ll_notify import messages
from src.ll_notify.messages import EXPIRY_THRESHOLDS, Notification
from src.ll_notify.sink import Notifier
from src.ll_views.application.unused import UnusedViewsLedger

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    started_at: datetime
    scanned: int = 0
    archived: int = 0
    expiry_notices: int = 0
    demoted: int = 0
    grace_notices: int = 0
    effects_expired: int = 0
    unused_views_carried: int = 0
    notifications_delivered: int = 0
    errors: int = 0


class ExpirationSweep:
    def __init__(
        self,
        repo: ListingRepositoryProtocol,
        unused_views: UnusedViewsLedger,
        notifier: Notifier,
        locks: KeyedLocks | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._repo = repo
        self._unused = unused_views
        self._notifier = notifier
        self._locks = locks or KeyedLocks()
        self._clock = clock

    async def run_once(self) -> SweepReport:
        now = self._clock()
        report = SweepReport(started_at=now)
        listings = await self._repo.list_listings()
        logger.debug("Sweep checking %d listings at %s", len(listings), now.isoformat())

        for candidate in listings:
            if candidate.is_deleted:
                continue
            report.scanned += 1
            try:
                notes = await self._process(candidate.id, now, report)
            except Exception:
                report.errors += 1
                logger.exception("Sweep failed for listing %s", candidate.id)
                continue
            report.notifications_delivered += await self._notifier.deliver_all(notes)

        logger.info(
            "Sweep done: scanned=%d archived=%d expiry_notices=%d demoted=%d errors=%d",
            report.scanned, report.archived, report.expiry_notices, report.demoted, report.errors,
        )
        return report

    async def _process(
        self, listing_id: str, now: datetime, report: SweepReport
    ) -> list[Notification]:
        notes: list[Notification] = []
        async with self._locks.listing(listing_id):
            listing = await self._repo.get_listing(listing_id)
            if listing is None or listing.is_deleted:
                return notes

            changed = False
            carried = 0
            days_remaining = days_until(listing.expires_at, now)
            if days_remaining <= 0:
                if not listing.is_archived:
                    carried = listing.unmet_view_target
                    clear_view_target(listing, reset_purchased=True)
                    archive(listing, now)
                    changed = True
                    report.archived += 1
                    logger.info(
                        "Listing auto-archived: id=%s expired=%s unused_views=%d",
                        listing.id, listing.expires_at, carried,
                    )
            elif not listing.is_archived:
                changed |= self._expiry_notice(listing, days_remaining, notes, report)

            changed |= self._promotion_window(listing, now, notes, report)
            changed |= self._expire_effects(listing, now, report)

            if changed:
                verify_listing_invariants(listing)
                await self._repo.save_listing(listing)

            if carried > 0:
                await self._unused.add(listing.owner_id, carried)
                report.unused_views_carried += carried
                notes.insert(
                    0,
                    messages.unused_views_saved(listing.owner_id, listing.id, listing.title, carried),
                )
        return notes

    def _expiry_notice(
        self,
        listing: Listing,
        days_remaining: int,
        notes: list[Notification],
        report: SweepReport,
    ) -> bool:
        if days_remaining not in EXPIRY_THRESHOLDS or days_remaining in listing.expiry_notices_sent:
            return False
        listing.expiry_notices_sent.add(days_remaining)
        notes.append(
            messages.expiry_notice(listing.owner_id, listing.id, listing.title, days_remaining)
        )
        report.expiry_notices += 1
        logger.info("Expiry notice queued: listing=%s days=%d", listing.id, days_remaining)
        return True

    def _promotion_window(
        self,
        listing: Listing,
        now: datetime,
        notes: list[Notification],
        report: SweepReport,
    ) -> bool:
        if listing.promotion_end_date is None or now <= listing.promotion_end_date:
            return False

        grace_end = listing.grace_period_end_date
        if grace_end is not None and not listing.is_store_owned:
            if now > grace_end:
                clear_promotion(listing)
                notes.append(messages.grace_ended(listing.owner_id, listing.id, listing.title))
                report.demoted += 1
                logger.info("Grace period ended, listing demoted: %s", listing.id)
                return True
            grace_days = days_until(grace_end, now)
            if grace_days <= 1 and not listing.grace_notice_sent:
                listing.grace_notice_sent = True
                notes.append(
                    messages.grace_ending(listing.owner_id, listing.id, listing.title, grace_days)
                )
                report.grace_notices += 1
                return True
            return False

        clear_promotion(listing)
        notes.append(messages.promotion_ended(listing.owner_id, listing.id, listing.title))
        report.demoted += 1
        logger.info("Promotion ended, listing demoted: %s", listing.id)
        return True

    def _expire_effects(self, listing: Listing, now: datetime, report: SweepReport) -> bool:
        changed = False
        for effect in listing.creative_effects:
            if effect.is_active and effect.end_date <= now:
                effect.is_active = False
                report.effects_expired += 1
                changed = True
        return changed
