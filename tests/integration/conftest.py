"""Integration-test fixtures.

Each test gets a fully wired container over a fresh in-memory store,
a manually advanced clock and a payment confirmation with a real await.
"""

import pytest_asyncio

from src.ll_app.container import Container, build_container
from src.ll_balance.application.payment import SimulatedPaymentConfirmation
from src.ll_notify.sink import InMemoryNotificationSink
from src.ll_store.memory import InMemoryRepository
from tests.conftest import FakeClock


@pytest_asyncio.fixture
async def app(clock: FakeClock) -> Container:
    """Container whose payment step yields to the event loop."""
    return build_container(
        InMemoryRepository(),
        InMemoryNotificationSink(),
        payments=SimulatedPaymentConfirmation(delay_seconds=0.001),
        clock=clock,
    )
