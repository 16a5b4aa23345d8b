"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from src.ll_app.container import Container, build_container
from src.ll_common.enums import BalancePool
from src.ll_common.errors import PaymentConfirmationError
from src.ll_listing.domain.models import Listing
from src.ll_notify.sink import InMemoryNotificationSink
from src.ll_store.memory import InMemoryRepository

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock injected wherever services take `clock`."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def sink() -> InMemoryNotificationSink:
    return InMemoryNotificationSink()


@pytest.fixture
def container(
    repo: InMemoryRepository, sink: InMemoryNotificationSink, clock: FakeClock
) -> Container:
    return build_container(repo, sink, clock=clock)


def make_listing(**overrides: object) -> Listing:
    defaults: dict[str, object] = {
        "id": "L-1",
        "owner_id": "user-1",
        "title": "Toyota Prius 2015",
        "created_at": T0,
        "expires_at": T0 + timedelta(days=30),
    }
    defaults.update(overrides)
    return Listing(**defaults)  # type: ignore[arg-type]


async def fund(
    container: Container, user_id: str = "user-1", wallet: int = 0, bonus: int = 0
) -> None:
    await container.ledger.open_account(user_id)
    if wallet:
        await container.ledger.credit(user_id, BalancePool.WALLET, wallet)
    if bonus:
        await container.ledger.credit(user_id, BalancePool.BONUS, bonus)


class FailingPayments:
    """Payment confirmation that always declines."""

    def __init__(self) -> None:
        self.calls = 0

    async def confirm(self, user_id: str, amount_cents: int, reference_id: str) -> None:
        self.calls += 1
        raise PaymentConfirmationError(f"declined: {reference_id}")


class BrokenSaveRepository(InMemoryRepository):
    """Fails every listing save after `armed` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.armed = False

    async def save_listing(self, listing: Listing) -> None:
        if self.armed:
            raise RuntimeError("storage unavailable")
        await super().save_listing(listing)
