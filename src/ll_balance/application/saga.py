"""Charge-then-apply compensation.

The ledger and the listing are separate entities with no shared transaction,
so a purchase debits first and, if anything inside the block fails, credits
back exactly the split that was taken before re-raising.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.ll_balance.application.service import BalanceLedgerService
from src.ll_balance.domain.models import DebitSplit
from src.ll_common.enums import LedgerEntryType
from src.ll_common.errors import InsufficientBalanceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def charged(
    ledger: BalanceLedgerService,
    user_id: str,
    amount: int,
    entry_type: LedgerEntryType,
    reference_id: str | None = None,
) -> AsyncIterator[DebitSplit]:
    split = await ledger.debit(user_id, amount, entry_type, reference_id)
    if split is None:
        raise InsufficientBalanceError(amount, await ledger.total_balance(user_id))
    try:
        yield split
    except Exception:
        logger.error(
            "Rolling back %s charge: user=%s ref=%s bonus=%d wallet=%d",
            entry_type.value, user_id, reference_id, split.from_bonus, split.from_wallet,
        )
        await ledger.refund(user_id, split, reference_id)
        raise
