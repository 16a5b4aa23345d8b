"""ListingLifecycleService — manual archive, renewal, soft delete and owner queries.

Reactivation charges the renewal package price with the same
debit / confirm / apply / refund-on-failure flow as the purchase engines.
"""

import logging
from datetime import timedelta

from src.ll_balance.application.payment import (
    PaymentConfirmationProtocol,
    SimulatedPaymentConfirmation,
)
from src.ll_balance.application.saga import charged
from src.ll_balance.application.service import BalanceLedgerService
from src.ll_balance.domain.models import DebitSplit
from src.ll_common.datetime_utils import Clock, utc_now
from src.ll_common.enums import LedgerEntryType
from src.ll_common.errors import (
    InsufficientBalanceError,
    InvalidInputError,
    ListingNotArchivedError,
    PackageNotFoundError,
)
from src.ll_common.locks import KeyedLocks
from src.ll_listing.application.rules import MAX_DURATION_DAYS, check_not_deleted, load_listing
from src.ll_listing.application.schemas import ReactivateCommand, ReactivationResult
from src.ll_listing.domain import state
from src.ll_listing.domain.catalog import RENEWAL_PACKAGES
from src.ll_listing.domain.models import Listing
from src.ll_listing.domain.repository import ListingRepositoryProtocol
from src.ll_notify import messages
from src.ll_notify.sink import Notifier
from src.ll_views.application.unused import UnusedViewsLedger

logger = logging.getLogger(__name__)


class ListingLifecycleService:
    def __init__(
        self,
        repo: ListingRepositoryProtocol,
        ledger: BalanceLedgerService,
        unused_views: UnusedViewsLedger,
        notifier: Notifier,
        locks: KeyedLocks | None = None,
        payments: PaymentConfirmationProtocol | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._repo = repo
        self._ledger = ledger
        self._unused = unused_views
        self._notifier = notifier
        self._locks = locks or KeyedLocks()
        self._payments = payments or SimulatedPaymentConfirmation()
        self._clock = clock

    async def archive(self, listing_id: str) -> Listing:
        """Archive by owner request. Promotion and view placement end with it.

        Views still owed on a purchased target go to the owner's unused views.
        """
        async with self._locks.listing(listing_id):
            listing = await load_listing(self._repo, listing_id)
            check_not_deleted(listing)
            if listing.is_archived:
                logger.warning("Listing already archived: %s", listing_id)
                return listing
            state.archive(listing, self._clock())
            state.clear_promotion(listing)
            carried = listing.unmet_view_target
            state.clear_view_target(listing, reset_purchased=True)
            await self._repo.save_listing(listing)
            if carried > 0:
                await self._unused.add(listing.owner_id, carried)

        logger.info("Listing archived: id=%s unused_views=%d", listing_id, carried)
        if carried > 0:
            await self._notifier.deliver(
                messages.unused_views_saved(listing.owner_id, listing.id, listing.title, carried)
            )
        return listing

    async def reactivate(self, cmd: ReactivateCommand) -> ReactivationResult:
        package = RENEWAL_PACKAGES.get(cmd.package_id)
        if package is None:
            raise PackageNotFoundError(cmd.package_id)

        async with self._locks.listing(cmd.listing_id):
            listing = await load_listing(self._repo, cmd.listing_id)
            _check_reactivatable(listing)
        owner_id = listing.owner_id

        if package.price_cents == 0:
            listing = await self._apply_reactivation(cmd.listing_id, package.duration_days)
            split = DebitSplit(from_bonus=0, from_wallet=0)
        else:
            if not await self._ledger.can_afford(owner_id, package.price_cents):
                raise InsufficientBalanceError(
                    package.price_cents, await self._ledger.total_balance(owner_id)
                )
            reference = f"renewal:{cmd.listing_id}"
            async with charged(
                self._ledger, owner_id, package.price_cents, LedgerEntryType.RENEWAL, reference
            ) as split:
                await self._payments.confirm(owner_id, package.price_cents, reference)
                listing = await self._apply_reactivation(cmd.listing_id, package.duration_days)

        logger.info(
            "Listing reactivated: id=%s package=%s expires=%s",
            listing.id, package.id, listing.expires_at,
        )
        return ReactivationResult(
            listing_id=listing.id,
            package_id=package.id,
            expires_at=listing.expires_at,
            charged_cents=split.total,
            from_bonus_cents=split.from_bonus,
            from_wallet_cents=split.from_wallet,
        )

    async def _apply_reactivation(self, listing_id: str, duration_days: int) -> Listing:
        async with self._locks.listing(listing_id):
            listing = await load_listing(self._repo, listing_id)
            _check_reactivatable(listing)
            state.reactivate(listing, self._clock() + timedelta(days=duration_days))
            await self._repo.save_listing(listing)
        return listing

    async def soft_delete(self, listing_id: str) -> Listing:
        async with self._locks.listing(listing_id):
            listing = await load_listing(self._repo, listing_id)
            if listing.is_deleted:
                logger.warning("Listing already deleted: %s", listing_id)
                return listing
            listing.deleted_at = self._clock()
            await self._repo.save_listing(listing)
        logger.info("Listing soft deleted: %s", listing_id)
        return listing

    async def get_archived(self, user_id: str) -> list[Listing]:
        return [
            listing
            for listing in await self._repo.list_listings()
            if listing.owner_id == user_id and not listing.is_deleted and listing.is_archived
        ]

    async def get_expiring(self, user_id: str, days: int) -> list[Listing]:
        """Active listings of user_id expiring within the next `days` days."""
        if isinstance(days, bool) or not isinstance(days, int) or not 0 <= days <= MAX_DURATION_DAYS:
            raise InvalidInputError(f"days must be within [0, {MAX_DURATION_DAYS}], got {days!r}")
        now = self._clock()
        horizon = now + timedelta(days=days)
        return [
            listing
            for listing in await self._repo.list_listings()
            if listing.owner_id == user_id
            and not listing.is_deleted
            and not listing.is_archived
            and now < listing.expires_at <= horizon
        ]


def _check_reactivatable(listing: Listing) -> None:
    check_not_deleted(listing)
    if not listing.is_archived:
        raise ListingNotArchivedError(listing.id)
