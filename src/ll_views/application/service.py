"""ViewPackageEngine — purchased view targets and view counting.

A purchase keeps the listing in the featured placement until its organic
view counter reaches `target_views_for_featured`. The target is checked on
every view increment. Views still owed when the listing expires are carried
to the owner's next listing (see ExpirationSweep and on_listing_created).
Only active listings accept purchases, so every paid target is either met
or carried over when the listing is archived.
"""

import logging

from config.settings import settings
from src.ll_balance.application.payment import (
    PaymentConfirmationProtocol,
    SimulatedPaymentConfirmation,
)
from src.ll_balance.application.saga import charged
from src.ll_balance.application.service import BalanceLedgerService
from src.ll_common.datetime_utils import Clock, utc_now
from src.ll_common.enums import LedgerEntryType
from src.ll_common.errors import (
    InsufficientBalanceError,
    ListingExistsError,
    PackageNotFoundError,
)
from src.ll_common.locks import KeyedLocks
from src.ll_listing.application.rules import check_active, load_listing
from src.ll_listing.domain.models import Listing
from src.ll_listing.domain.repository import ListingRepositoryProtocol
from src.ll_listing.domain.state import (
    clear_view_target,
    set_view_target,
    verify_listing_invariants,
)
from src.ll_notify import messages
from src.ll_notify.sink import Notifier
from src.ll_views.application.schemas import (
    PurchaseViewPackageCommand,
    PurchaseViewsCommand,
    ViewCountResult,
    ViewPurchaseResult,
)
from src.ll_views.application.unused import UnusedViewsLedger
from src.ll_views.domain.catalog import VIEW_PACKAGES

logger = logging.getLogger(__name__)


class ViewPackageEngine:
    def __init__(
        self,
        repo: ListingRepositoryProtocol,
        ledger: BalanceLedgerService,
        unused_views: UnusedViewsLedger,
        notifier: Notifier,
        locks: KeyedLocks | None = None,
        payments: PaymentConfirmationProtocol | None = None,
        clock: Clock = utc_now,
        max_views: int = settings.MAX_VIEW_COUNT,
    ) -> None:
        self._repo = repo
        self._ledger = ledger
        self._unused = unused_views
        self._notifier = notifier
        self._locks = locks or KeyedLocks()
        self._payments = payments or SimulatedPaymentConfirmation()
        self._clock = clock
        self._max_views = max_views

    async def purchase_view_package(self, cmd: PurchaseViewPackageCommand) -> ViewPurchaseResult:
        package = VIEW_PACKAGES.get(cmd.package_id)
        if package is None:
            raise PackageNotFoundError(cmd.package_id)
        return await self._purchase(cmd.listing_id, package.views, package.price_cents)

    async def purchase_views(self, cmd: PurchaseViewsCommand) -> ViewPurchaseResult:
        return await self._purchase(cmd.listing_id, cmd.view_count, cmd.cost_cents)

    async def _purchase(self, listing_id: str, view_count: int, cost: int) -> ViewPurchaseResult:
        async with self._locks.listing(listing_id):
            listing = await load_listing(self._repo, listing_id)
            check_active(listing, self._clock())
        owner_id = listing.owner_id

        if not await self._ledger.can_afford(owner_id, cost):
            raise InsufficientBalanceError(cost, await self._ledger.total_balance(owner_id))

        reference = f"views:{listing_id}"
        async with charged(
            self._ledger, owner_id, cost, LedgerEntryType.VIEW_PURCHASE, reference
        ) as split:
            await self._payments.confirm(owner_id, cost, reference)

            async with self._locks.listing(listing_id):
                listing = await load_listing(self._repo, listing_id)
                check_active(listing, self._clock())
                target = set_view_target(listing, view_count)
                verify_listing_invariants(listing)
                await self._repo.save_listing(listing)

        logger.info(
            "Views purchased: listing=%s views=%d target=%d cost=%d",
            listing_id, view_count, target, cost,
        )
        await self._notifier.deliver(
            messages.views_purchased(owner_id, listing_id, view_count, target)
        )
        return ViewPurchaseResult(
            listing_id=listing_id,
            purchased_views=listing.purchased_views,
            target_views_for_featured=target,
            charged_cents=split.total,
            from_bonus_cents=split.from_bonus,
            from_wallet_cents=split.from_wallet,
        )

    async def increment_view(self, listing_id: str) -> ViewCountResult:
        async with self._locks.listing(listing_id):
            listing = await load_listing(self._repo, listing_id)
            new_views = listing.views + 1
            if new_views > self._max_views:
                logger.warning(
                    "View count too high, not incrementing: listing=%s views=%d",
                    listing_id, listing.views,
                )
                return ViewCountResult(listing_id=listing_id, views=listing.views, capped=True)

            listing.views = new_views
            target_reached = (
                listing.target_views_for_featured is not None
                and new_views >= listing.target_views_for_featured
            )
            if target_reached:
                clear_view_target(listing)
            await self._repo.save_listing(listing)

        if target_reached:
            logger.info("View target reached: listing=%s views=%d", listing_id, new_views)
            await self._notifier.deliver(
                messages.view_target_reached(listing.owner_id, listing_id, listing.title)
            )
        return ViewCountResult(listing_id=listing_id, views=new_views, target_reached=target_reached)

    async def on_listing_created(self, listing: Listing) -> Listing:
        """Persist a newly created listing and move the owner's unused views onto it."""
        async with self._locks.listing(listing.id):
            if await self._repo.get_listing(listing.id) is not None:
                raise ListingExistsError(listing.id)
            carried = await self._unused.take(listing.owner_id)
            if carried > 0:
                set_view_target(listing, carried)
            try:
                verify_listing_invariants(listing)
                await self._repo.save_listing(listing)
            except Exception:
                if carried > 0:
                    await self._unused.restore(listing.owner_id, carried)
                raise

        if carried > 0:
            logger.info(
                "Unused views transferred: user=%s listing=%s views=%d target=%s",
                listing.owner_id, listing.id, carried, listing.target_views_for_featured,
            )
            await self._notifier.deliver(
                messages.unused_views_applied(listing.owner_id, listing.id, carried)
            )
        return listing

    async def unused_views(self, user_id: str) -> int:
        return await self._unused.get(user_id)
