"""Unit tests for PromotionEngine."""

from datetime import timedelta

import pytest

from src.ll_app.container import Container, build_container
from src.ll_common.enums import AdType
from src.ll_common.errors import (
    InsufficientBalanceError,
    ListingArchivedError,
    ListingDeletedError,
    ListingExpiredError,
    ListingNotFoundError,
    PackageNotFoundError,
    PaymentConfirmationError,
)
from src.ll_notify.sink import InMemoryNotificationSink
from src.ll_promotion.application.schemas import PromoteCommand, PromotePackageCommand
from src.ll_store.memory import InMemoryRepository
from tests.conftest import (
    T0,
    BrokenSaveRepository,
    FailingPayments,
    FakeClock,
    fund,
    make_listing,
)


def _cmd(**overrides: object) -> PromoteCommand:
    data: dict[str, object] = {
        "listing_id": "L-1",
        "promotion_type": AdType.VIP,
        "duration_days": 7,
        "cost_cents": 400,
    }
    data.update(overrides)
    return PromoteCommand.parse(**data)


class TestPromote:
    async def test_bonus_first_charge(self, container: Container, repo: InMemoryRepository) -> None:
        await repo.save_listing(make_listing(expires_at=T0 + timedelta(days=3)))
        await fund(container, wallet=300, bonus=200)

        result = await container.promotions.promote(_cmd())

        assert (result.from_bonus_cents, result.from_wallet_cents) == (200, 200)
        ledger = await container.ledger.get_ledger("user-1")
        assert (ledger.wallet_cents, ledger.bonus_cents) == (100, 0)

        listing = await repo.get_listing("L-1")
        assert listing is not None
        assert listing.ad_type is AdType.VIP
        assert listing.is_vip and listing.is_premium and listing.is_featured
        assert listing.promotion_end_date == T0 + timedelta(days=7)
        assert listing.grace_period_end_date == T0 + timedelta(days=9)
        assert result.renewed is False

    async def test_end_date_never_before_listing_expiry(
        self, container: Container, repo: InMemoryRepository
    ) -> None:
        await repo.save_listing(make_listing(expires_at=T0 + timedelta(days=30)))
        await fund(container, wallet=1000)
        result = await container.promotions.promote(_cmd(duration_days=7))
        assert result.promotion_end_date == T0 + timedelta(days=30)

    async def test_store_listing_has_no_grace(
        self, container: Container, repo: InMemoryRepository
    ) -> None:
        await repo.save_listing(make_listing(store_id="store-1"))
        await fund(container, wallet=1000)
        result = await container.promotions.promote(_cmd(promotion_type=AdType.PREMIUM))
        assert result.grace_period_end_date is None

    async def test_renewal_overwrites(
        self, container: Container, repo: InMemoryRepository, clock: FakeClock
    ) -> None:
        await repo.save_listing(make_listing(expires_at=T0 + timedelta(days=3)))
        await fund(container, wallet=2000)
        await container.promotions.promote(_cmd(promotion_type=AdType.FEATURED))

        clock.advance(days=1)
        result = await container.promotions.promote(
            _cmd(promotion_type=AdType.PREMIUM, duration_days=14)
        )
        assert result.renewed is True
        listing = await repo.get_listing("L-1")
        assert listing is not None
        assert listing.ad_type is AdType.PREMIUM
        assert (listing.is_premium, listing.is_featured, listing.is_vip) == (True, False, False)
        assert listing.promotion_end_date == T0 + timedelta(days=15)
        assert await container.ledger.total_balance("user-1") == 1200


class TestPromotePreconditions:
    async def test_missing_listing(self, container: Container) -> None:
        await fund(container, wallet=1000)
        with pytest.raises(ListingNotFoundError):
            await container.promotions.promote(_cmd(listing_id="nope"))

    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"deleted_at": T0}, ListingDeletedError),
            ({"is_archived": True, "archived_at": T0}, ListingArchivedError),
            ({"expires_at": T0}, ListingExpiredError),
        ],
    )
    async def test_listing_state(
        self,
        container: Container,
        repo: InMemoryRepository,
        overrides: dict[str, object],
        error: type[Exception],
    ) -> None:
        await repo.save_listing(make_listing(**overrides))
        await fund(container, wallet=1000)
        with pytest.raises(error):
            await container.promotions.promote(_cmd())
        assert await container.ledger.total_balance("user-1") == 1000

    async def test_insufficient_balance(
        self, container: Container, repo: InMemoryRepository
    ) -> None:
        await repo.save_listing(make_listing())
        await fund(container, wallet=300, bonus=50)
        with pytest.raises(InsufficientBalanceError) as exc_info:
            await container.promotions.promote(_cmd())
        assert "available 350" in exc_info.value.message
        listing = await repo.get_listing("L-1")
        assert listing is not None and listing.ad_type is AdType.FREE
        ledger = await container.ledger.get_ledger("user-1")
        assert (ledger.wallet_cents, ledger.bonus_cents) == (300, 50)


class TestPromoteRollback:
    async def test_declined_payment_refunds(
        self, repo: InMemoryRepository, sink: InMemoryNotificationSink, clock: FakeClock
    ) -> None:
        payments = FailingPayments()
        container = build_container(repo, sink, payments=payments, clock=clock)
        await repo.save_listing(make_listing())
        await fund(container, wallet=300, bonus=200)

        with pytest.raises(PaymentConfirmationError):
            await container.promotions.promote(_cmd())

        assert payments.calls == 1
        ledger = await container.ledger.get_ledger("user-1")
        assert (ledger.wallet_cents, ledger.bonus_cents) == (300, 200)
        listing = await repo.get_listing("L-1")
        assert listing is not None and listing.ad_type is AdType.FREE

    async def test_failed_save_refunds_exact_split(
        self, sink: InMemoryNotificationSink, clock: FakeClock
    ) -> None:
        repo = BrokenSaveRepository()
        container = build_container(repo, sink, clock=clock)
        await repo.save_listing(make_listing())
        await fund(container, wallet=300, bonus=200)
        repo.armed = True

        with pytest.raises(RuntimeError, match="storage unavailable"):
            await container.promotions.promote(_cmd())

        ledger = await container.ledger.get_ledger("user-1")
        assert (ledger.wallet_cents, ledger.bonus_cents) == (300, 200)
        entries = await container.ledger.list_entries("user-1")
        assert [e.entry_type for e in entries[:2]] == ["REFUND", "PROMOTION"]

    async def test_listing_deleted_during_confirmation(
        self, repo: InMemoryRepository, sink: InMemoryNotificationSink, clock: FakeClock
    ) -> None:
        class DeletingPayments:
            async def confirm(self, user_id: str, amount_cents: int, reference_id: str) -> None:
                listing = await repo.get_listing("L-1")
                assert listing is not None
                listing.deleted_at = T0
                await repo.save_listing(listing)

        container = build_container(repo, sink, payments=DeletingPayments(), clock=clock)
        await repo.save_listing(make_listing())
        await fund(container, wallet=1000)

        with pytest.raises(ListingDeletedError):
            await container.promotions.promote(_cmd())
        assert await container.ledger.total_balance("user-1") == 1000


class TestPromotePackage:
    async def test_package(self, container: Container, repo: InMemoryRepository) -> None:
        await repo.save_listing(make_listing(expires_at=T0 + timedelta(days=1)))
        await fund(container, wallet=1000)
        result = await container.promotions.promote_package(
            PromotePackageCommand(listing_id="L-1", package_id="premium-14")
        )
        assert result.ad_type is AdType.PREMIUM
        assert result.charged_cents == 800
        assert result.promotion_end_date == T0 + timedelta(days=14)

    async def test_unknown_package(self, container: Container, repo: InMemoryRepository) -> None:
        await repo.save_listing(make_listing())
        with pytest.raises(PackageNotFoundError):
            await container.promotions.promote_package(
                PromotePackageCommand(listing_id="L-1", package_id="gold-1")
            )
