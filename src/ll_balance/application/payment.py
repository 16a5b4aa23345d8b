"""Payment confirmation step awaited between the debit and the listing mutation.

No lock is held while waiting. A confirmation that raises triggers the
charge rollback in `charged`.
"""

import asyncio
import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class PaymentConfirmationProtocol(Protocol):
    async def confirm(self, user_id: str, amount_cents: int, reference_id: str) -> None: ...


class SimulatedPaymentConfirmation:
    """Confirms every payment, optionally after a fixed delay."""

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay = delay_seconds

    async def confirm(self, user_id: str, amount_cents: int, reference_id: str) -> None:
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        logger.debug(
            "Payment confirmed: user=%s amount=%d ref=%s", user_id, amount_cents, reference_id
        )
