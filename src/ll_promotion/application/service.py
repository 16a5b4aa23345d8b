"""PromotionEngine — premium/featured/vip purchases.

Flow per purchase:
  1. Preconditions (listing state, affordability), no mutation.
  2. Debit the owner's ledger, bonus first.
  3. Await payment confirmation with no lock held.
  4. Re-read the listing under its lock, re-check, apply, save.
Any failure after step 2 refunds the exact split and re-raises.
"""

import logging

from config.settings import settings
from src.ll_balance.application.payment import (
    PaymentConfirmationProtocol,
    SimulatedPaymentConfirmation,
)
from src.ll_balance.application.saga import charged
from src.ll_balance.application.service import BalanceLedgerService
from src.ll_common.datetime_utils import Clock, later_of, utc_now
from src.ll_common.enums import LedgerEntryType
from src.ll_common.errors import InsufficientBalanceError, PackageNotFoundError
from src.ll_common.locks import KeyedLocks
from src.ll_listing.application.rules import check_active, load_listing
from src.ll_listing.domain.repository import ListingRepositoryProtocol
from src.ll_listing.domain.state import apply_promotion, verify_listing_invariants
from src.ll_promotion.application.schemas import (
    PromoteCommand,
    PromotePackageCommand,
    PromotionResult,
)
from src.ll_promotion.domain.catalog import PROMOTION_PACKAGES

logger = logging.getLogger(__name__)


class PromotionEngine:
    def __init__(
        self,
        repo: ListingRepositoryProtocol,
        ledger: BalanceLedgerService,
        locks: KeyedLocks | None = None,
        payments: PaymentConfirmationProtocol | None = None,
        clock: Clock = utc_now,
        grace_days: int = settings.GRACE_PERIOD_DAYS,
    ) -> None:
        self._repo = repo
        self._ledger = ledger
        self._locks = locks or KeyedLocks()
        self._payments = payments or SimulatedPaymentConfirmation()
        self._clock = clock
        self._grace_days = grace_days

    async def promote_package(self, cmd: PromotePackageCommand) -> PromotionResult:
        package = PROMOTION_PACKAGES.get(cmd.package_id)
        if package is None:
            raise PackageNotFoundError(cmd.package_id)
        return await self.promote(
            PromoteCommand(
                listing_id=cmd.listing_id,
                promotion_type=package.ad_type,
                duration_days=package.duration_days,
                cost_cents=package.price_cents,
            )
        )

    async def promote(self, cmd: PromoteCommand) -> PromotionResult:
        async with self._locks.listing(cmd.listing_id):
            listing = await load_listing(self._repo, cmd.listing_id)
            check_active(listing, self._clock())
        owner_id = listing.owner_id

        if not await self._ledger.can_afford(owner_id, cmd.cost_cents):
            raise InsufficientBalanceError(
                cmd.cost_cents, await self._ledger.total_balance(owner_id)
            )

        reference = f"promotion:{cmd.listing_id}"
        async with charged(
            self._ledger, owner_id, cmd.cost_cents, LedgerEntryType.PROMOTION, reference
        ) as split:
            await self._payments.confirm(owner_id, cmd.cost_cents, reference)

            async with self._locks.listing(cmd.listing_id):
                listing = await load_listing(self._repo, cmd.listing_id)
                now = self._clock()
                check_active(listing, now)

                renewed = listing.is_promoted
                if renewed:
                    logger.warning(
                        "Listing already has an active promotion, renewing: "
                        "listing=%s current=%s ends=%s",
                        listing.id, listing.ad_type.value, listing.promotion_end_date,
                    )

                promotion_end = later_of(listing.expires_at, now, cmd.duration_days)
                apply_promotion(listing, cmd.promotion_type, promotion_end, self._grace_days)
                verify_listing_invariants(listing)
                await self._repo.save_listing(listing)

        logger.info(
            "Promoted listing: id=%s type=%s ends=%s cost=%d",
            listing.id, cmd.promotion_type.value, promotion_end, cmd.cost_cents,
        )
        return PromotionResult(
            listing_id=listing.id,
            ad_type=listing.ad_type,
            promotion_end_date=promotion_end,
            grace_period_end_date=listing.grace_period_end_date,
            charged_cents=split.total,
            from_bonus_cents=split.from_bonus,
            from_wallet_cents=split.from_wallet,
            renewed=renewed,
        )
