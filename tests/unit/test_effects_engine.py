from datetime import timedelta

import pytest

from src.ll_app.container import Container, build_container
from src.ll_common.errors import (
    DuplicateEffectError,
    InsufficientBalanceError,
    InvalidEffectError,
    ListingDeletedError,
    PaymentConfirmationError,
)
from src.ll_effects.application.schemas import ApplyEffectsCommand
from src.ll_effects.application.service import check_effect_batch
from src.ll_listing.domain.models import CreativeEffect
from src.ll_notify.sink import InMemoryNotificationSink
from src.ll_store.memory import InMemoryRepository
from tests.conftest import (
    T0,
    BrokenSaveRepository,
    FailingPayments,
    FakeClock,
    fund,
    make_listing,
)


def _effects(*specs: tuple[str, int, int]) -> ApplyEffectsCommand:
    return ApplyEffectsCommand.parse(
        listing_id="L-1",
        effects=[{"id": i, "price_cents": p, "duration_days": d} for i, p, d in specs],
    )


class TestCheckEffectBatch:
    def test_total(self) -> None:
        assert check_effect_batch(_effects(("glow", 150, 3), ("frame", 250, 7)), 10) == 400

    def test_too_many(self) -> None:
        cmd = _effects(*((f"e{i}", 100, 1) for i in range(11)))
        with pytest.raises(InvalidEffectError, match="limit of 10"):
            check_effect_batch(cmd, 10)

    def test_duplicate_id(self) -> None:
        with pytest.raises(DuplicateEffectError):
            check_effect_batch(_effects(("glow", 100, 3), ("glow", 200, 7)), 10)

    def test_total_over_limit(self) -> None:
        cmd = _effects(*((f"e{i}", 10_000, 1) for i in range(10)), ("extra", 1, 1))
        with pytest.raises(InvalidEffectError):
            check_effect_batch(cmd, 20)


class TestApplyEffects:
    async def test_applies_and_charges(
        self, container: Container, repo: InMemoryRepository, sink: InMemoryNotificationSink
    ) -> None:
        await repo.save_listing(make_listing(expires_at=T0 + timedelta(days=5)))
        await fund(container, wallet=300, bonus=100)

        result = await container.effects.apply_effects(
            _effects(("glow", 150, 3), ("frame", 250, 7))
        )

        assert result.charged_cents == 400
        assert (result.from_bonus_cents, result.from_wallet_cents) == (100, 300)
        ends = {e.id: e.end_date for e in result.effects}
        assert ends == {"glow": T0 + timedelta(days=5), "frame": T0 + timedelta(days=7)}
        listing = await repo.get_listing("L-1")
        assert listing is not None
        assert [e.id for e in listing.creative_effects] == ["glow", "frame"]
        assert all(e.is_active for e in listing.creative_effects)
        assert sink.titles_for("user-1") == ["Creative effects applied"]

    async def test_new_batch_replaces_old(
        self, container: Container, repo: InMemoryRepository, clock: FakeClock
    ) -> None:
        await repo.save_listing(make_listing())
        await fund(container, wallet=1000)
        await container.effects.apply_effects(_effects(("glow", 100, 3)))
        clock.advance(days=1)
        await container.effects.apply_effects(_effects(("frame", 100, 3)))
        listing = await repo.get_listing("L-1")
        assert listing is not None
        assert [e.id for e in listing.creative_effects] == ["frame"]

    async def test_insufficient(self, container: Container, repo: InMemoryRepository) -> None:
        await repo.save_listing(make_listing())
        await fund(container, wallet=100)
        with pytest.raises(InsufficientBalanceError):
            await container.effects.apply_effects(_effects(("glow", 150, 3)))
        listing = await repo.get_listing("L-1")
        assert listing is not None and listing.creative_effects == []

    async def test_deleted(self, container: Container, repo: InMemoryRepository) -> None:
        await repo.save_listing(make_listing(deleted_at=T0))
        await fund(container, wallet=1000)
        with pytest.raises(ListingDeletedError):
            await container.effects.apply_effects(_effects(("glow", 150, 3)))
        assert await container.ledger.total_balance("user-1") == 1000

    async def test_invalid_batch_checked_before_listing(self, container: Container) -> None:
        with pytest.raises(DuplicateEffectError):
            await container.effects.apply_effects(_effects(("glow", 1, 1), ("glow", 1, 1)))


class TestApplyEffectsRollback:
    async def test_declined_payment_restores_balance(
        self, repo: InMemoryRepository, sink: InMemoryNotificationSink, clock: FakeClock
    ) -> None:
        container = build_container(repo, sink, payments=FailingPayments(), clock=clock)
        before = [CreativeEffect("frame", 200, 7, end_date=T0 + timedelta(days=7))]
        await repo.save_listing(make_listing(creative_effects=before))
        await fund(container, wallet=300, bonus=100)

        with pytest.raises(PaymentConfirmationError):
            await container.effects.apply_effects(_effects(("glow", 150, 3), ("spark", 250, 7)))

        ledger = await container.ledger.get_ledger("user-1")
        assert (ledger.wallet_cents, ledger.bonus_cents) == (300, 100)
        listing = await repo.get_listing("L-1")
        assert listing is not None
        assert listing.creative_effects == before
        assert sink.sent == []

    async def test_failed_save_restores_balance(
        self, sink: InMemoryNotificationSink, clock: FakeClock
    ) -> None:
        repo = BrokenSaveRepository()
        container = build_container(repo, sink, clock=clock)
        await repo.save_listing(make_listing())
        await fund(container, wallet=300, bonus=100)
        repo.armed = True

        with pytest.raises(RuntimeError, match="storage unavailable"):
            await container.effects.apply_effects(_effects(("glow", 150, 3), ("spark", 250, 7)))

        ledger = await container.ledger.get_ledger("user-1")
        assert (ledger.wallet_cents, ledger.bonus_cents) == (300, 100)
        entries = await container.ledger.list_entries("user-1")
        assert [e.entry_type for e in entries[:2]] == ["REFUND", "CREATIVE_EFFECTS"]
        listing = await repo.get_listing("L-1")
        assert listing is not None and listing.creative_effects == []
