"""CreativeEffectEngine — timed visual effects bought as one batch.

A batch replaces whatever effects the listing had before; effects are not
merged with earlier purchases.
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
from src.ll_common.errors import (
    DuplicateEffectError,
    InsufficientBalanceError,
    InvalidEffectError,
)
from src.ll_common.locks import KeyedLocks
from src.ll_effects.application.schemas import (
    MAX_EFFECTS_TOTAL_CENTS,
    AppliedEffect,
    ApplyEffectsCommand,
    EffectsResult,
)
from src.ll_listing.application.rules import check_not_deleted, load_listing
from src.ll_listing.domain.models import CreativeEffect
from src.ll_listing.domain.repository import ListingRepositoryProtocol
from src.ll_notify import messages
from src.ll_notify.sink import Notifier

logger = logging.getLogger(__name__)


def check_effect_batch(cmd: ApplyEffectsCommand, max_batch: int) -> int:
    """Validate batch size, id uniqueness and total price. Returns the total in cents."""
    if len(cmd.effects) > max_batch:
        raise InvalidEffectError(f"{len(cmd.effects)} effects exceeds the limit of {max_batch}")
    seen: set[str] = set()
    for effect in cmd.effects:
        if effect.id in seen:
            raise DuplicateEffectError(effect.id)
        seen.add(effect.id)
    total = cmd.total_cents
    if total > MAX_EFFECTS_TOTAL_CENTS:
        raise InvalidEffectError(f"total {total} cents exceeds {MAX_EFFECTS_TOTAL_CENTS}")
    return total


class CreativeEffectEngine:
    def __init__(
        self,
        repo: ListingRepositoryProtocol,
        ledger: BalanceLedgerService,
        notifier: Notifier,
        locks: KeyedLocks | None = None,
        payments: PaymentConfirmationProtocol | None = None,
        clock: Clock = utc_now,
        max_batch: int = settings.MAX_EFFECTS_PER_BATCH,
    ) -> None:
        self._repo = repo
        self._ledger = ledger
        self._notifier = notifier
        self._locks = locks or KeyedLocks()
        self._payments = payments or SimulatedPaymentConfirmation()
        self._clock = clock
        self._max_batch = max_batch

    async def apply_effects(self, cmd: ApplyEffectsCommand) -> EffectsResult:
        total = check_effect_batch(cmd, self._max_batch)

        async with self._locks.listing(cmd.listing_id):
            listing = await load_listing(self._repo, cmd.listing_id)
            check_not_deleted(listing)
        owner_id = listing.owner_id

        if not await self._ledger.can_afford(owner_id, total):
            raise InsufficientBalanceError(total, await self._ledger.total_balance(owner_id))

        reference = f"effects:{cmd.listing_id}"
        async with charged(
            self._ledger, owner_id, total, LedgerEntryType.CREATIVE_EFFECTS, reference
        ) as split:
            await self._payments.confirm(owner_id, total, reference)

            async with self._locks.listing(cmd.listing_id):
                listing = await load_listing(self._repo, cmd.listing_id)
                check_not_deleted(listing)
                now = self._clock()
                listing.creative_effects = [
                    CreativeEffect(
                        id=e.id,
                        price_cents=e.price_cents,
                        duration_days=e.duration_days,
                        end_date=later_of(listing.expires_at, now, e.duration_days),
                    )
                    for e in cmd.effects
                ]
                await self._repo.save_listing(listing)

        logger.info(
            "Creative effects applied: listing=%s count=%d total=%d",
            cmd.listing_id, len(cmd.effects), total,
        )
        await self._notifier.deliver(
            messages.effects_applied(owner_id, cmd.listing_id, len(cmd.effects))
        )
        return EffectsResult(
            listing_id=cmd.listing_id,
            effects=[
                AppliedEffect(id=e.id, price_cents=e.price_cents, end_date=e.end_date)
                for e in listing.creative_effects
            ],
            charged_cents=split.total,
            from_bonus_cents=split.from_bonus,
            from_wallet_cents=split.from_wallet,
        )
