"""Composition root: wires every service for one process around a shared store and lock registry."""

from dataclasses import dataclass

from config.settings import settings
from src.ll_balance.application.payment import (
    PaymentConfirmationProtocol,
    SimulatedPaymentConfirmation,
)
from src.ll_balance.application.service import BalanceLedgerService
from src.ll_common.datetime_utils import Clock, utc_now
from src.ll_common.locks import KeyedLocks
from src.ll_effects.application.service import CreativeEffectEngine
from src.ll_listing.application.service import ListingLifecycleService
from src.ll_notify.sink import NotificationSinkProtocol, Notifier
from src.ll_promotion.application.service import PromotionEngine
from src.ll_store.repository import RepositoryProtocol
from src.ll_sweep.expiration import ExpirationSweep
from src.ll_sweep.scheduler import SweepScheduler
from src.ll_views.application.service import ViewPackageEngine
from src.ll_views.application.unused import UnusedViewsLedger


@dataclass
class Container:
    repo: RepositoryProtocol
    locks: KeyedLocks
    notifier: Notifier
    ledger: BalanceLedgerService
    unused_views: UnusedViewsLedger
    promotions: PromotionEngine
    views: ViewPackageEngine
    effects: CreativeEffectEngine
    lifecycle: ListingLifecycleService
    sweep: ExpirationSweep

    def scheduler(self, interval_seconds: float = settings.SWEEP_INTERVAL_SECONDS) -> SweepScheduler:
        return SweepScheduler(self.sweep, interval_seconds)


def build_container(
    repo: RepositoryProtocol,
    sink: NotificationSinkProtocol,
    payments: PaymentConfirmationProtocol | None = None,
    clock: Clock = utc_now,
) -> Container:
    locks = KeyedLocks()
    notifier = Notifier(sink)
    payments = payments or SimulatedPaymentConfirmation(settings.PAYMENT_CONFIRM_DELAY_SECONDS)
    ledger = BalanceLedgerService(repo, locks, clock)
    unused_views = UnusedViewsLedger(repo, locks)
    return Container(
        repo=repo,
        locks=locks,
        notifier=notifier,
        ledger=ledger,
        unused_views=unused_views,
        promotions=PromotionEngine(repo, ledger, locks, payments, clock),
        views=ViewPackageEngine(repo, ledger, unused_views, notifier, locks, payments, clock),
        effects=CreativeEffectEngine(repo, ledger, notifier, locks, payments, clock),
        lifecycle=ListingLifecycleService(
            repo, ledger, unused_views, notifier, locks, payments, clock
        ),
        sweep=ExpirationSweep(repo, unused_views, notifier, locks, clock),
    )
