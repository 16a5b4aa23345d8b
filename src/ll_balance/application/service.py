"""BalanceLedgerService — the only code path that moves money between pools.

Every committed transition is one `save_balance` call carrying both pool
values, made while holding the user's balance lock, so no observer can see
a state where only one pool changed. Each transition appends a journal entry.
"""

import logging
import uuid
from dataclasses import replace

from src.ll_balance.domain.models import (
    BONUS_CEILING,
    BONUS_CREDIT_CAP,
    WALLET_CEILING,
    WALLET_CREDIT_CAP,
    BalanceLedger,
    DebitSplit,
    LedgerEntry,
    split_bonus_first,
)
from src.ll_balance.domain.repository import BalanceRepositoryProtocol
from src.ll_common.cents import require_cents
from src.ll_common.datetime_utils import Clock, utc_now
from src.ll_common.enums import BalancePool, LedgerEntryType
from src.ll_common.errors import BalanceNotFoundError, InvalidAmountError, InvalidInputError
from src.ll_common.locks import KeyedLocks

logger = logging.getLogger(__name__)

_CREDIT_LIMITS: dict[BalancePool, tuple[int, int]] = {
    BalancePool.WALLET: (WALLET_CREDIT_CAP, WALLET_CEILING),
    BalancePool.BONUS: (BONUS_CREDIT_CAP, BONUS_CEILING),
}


class BalanceLedgerService:
    def __init__(
        self,
        repo: BalanceRepositoryProtocol,
        locks: KeyedLocks | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._repo = repo
        self._locks = locks or KeyedLocks()
        self._clock = clock

    async def open_account(self, user_id: str) -> BalanceLedger:
        """Create an empty ledger for user_id, or return the existing one."""
        async with self._locks.balance(user_id):
            existing = await self._repo.get_balance(user_id)
            if existing is not None:
                return existing
            ledger = BalanceLedger(user_id=user_id, updated_at=self._clock())
            await self._repo.save_balance(user_id, ledger)
            logger.info("Opened balance ledger: user=%s", user_id)
            return ledger

    async def get_ledger(self, user_id: str) -> BalanceLedger:
        ledger = await self._repo.get_balance(user_id)
        if ledger is None:
            raise BalanceNotFoundError(user_id)
        return ledger

    async def total_balance(self, user_id: str) -> int:
        return (await self.get_ledger(user_id)).total_cents

    async def can_afford(self, user_id: str, amount: int) -> bool:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            logger.error("Invalid amount for can_afford: user=%s amount=%r", user_id, amount)
            return False
        return (await self.get_ledger(user_id)).total_cents >= amount

    async def credit(
        self,
        user_id: str,
        pool: BalancePool,
        amount: int,
        reference_id: str | None = None,
    ) -> BalanceLedger:
        """Top up one pool. Raises InvalidAmountError on caps or ceiling breach."""
        try:
            pool = BalancePool(pool)
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown balance pool {pool!r}: must be wallet or bonus"
            ) from exc
        per_tx_cap, ceiling = _CREDIT_LIMITS[pool]
        require_cents(amount, upper=per_tx_cap)

        async with self._locks.balance(user_id):
            ledger = await self.get_ledger(user_id)
            if pool is BalancePool.WALLET:
                new_wallet, new_bonus = ledger.wallet_cents + amount, ledger.bonus_cents
                current_after = new_wallet
            else:
                new_wallet, new_bonus = ledger.wallet_cents, ledger.bonus_cents + amount
                current_after = new_bonus
            if current_after > ceiling:
                raise InvalidAmountError(
                    f"{pool.value} balance would reach {current_after}, ceiling is {ceiling}"
                )
            entry_type = (
                LedgerEntryType.TOP_UP if pool is BalancePool.WALLET else LedgerEntryType.BONUS_GRANT
            )
            updated = await self._commit(
                ledger, new_wallet, new_bonus, entry_type, reference_id
            )

        logger.info(
            "Credited %s: user=%s amount=%d wallet=%d bonus=%d",
            pool.value, user_id, amount, updated.wallet_cents, updated.bonus_cents,
        )
        return updated

    async def debit(
        self,
        user_id: str,
        amount: int,
        entry_type: LedgerEntryType,
        reference_id: str | None = None,
    ) -> DebitSplit | None:
        """Spend bonus first, then wallet.

        Returns None and leaves both pools untouched when the total cannot cover amount.
        """
        require_cents(amount)

        async with self._locks.balance(user_id):
            ledger = await self.get_ledger(user_id)
            split = split_bonus_first(ledger, amount)
            if split is None:
                logger.warning(
                    "Insufficient balance: user=%s required=%d available=%d",
                    user_id, amount, ledger.total_cents,
                )
                return None
            await self._commit(
                ledger,
                max(0, ledger.wallet_cents - split.from_wallet),
                max(0, ledger.bonus_cents - split.from_bonus),
                entry_type,
                reference_id,
            )

        logger.info(
            "Debited: user=%s amount=%d bonus=%d wallet=%d ref=%s",
            user_id, amount, split.from_bonus, split.from_wallet, reference_id,
        )
        return split

    async def refund(
        self, user_id: str, split: DebitSplit, reference_id: str | None = None
    ) -> BalanceLedger:
        """Compensate a debit: give back exactly what was taken from each pool.

        Top-up caps do not apply; this restores a prior state rather than adding funds.
        """
        async with self._locks.balance(user_id):
            ledger = await self.get_ledger(user_id)
            updated = await self._commit(
                ledger,
                ledger.wallet_cents + split.from_wallet,
                ledger.bonus_cents + split.from_bonus,
                LedgerEntryType.REFUND,
                reference_id,
            )

        logger.warning(
            "Refunded: user=%s bonus=%d wallet=%d ref=%s",
            user_id, split.from_bonus, split.from_wallet, reference_id,
        )
        return updated

    async def list_entries(self, user_id: str) -> list[LedgerEntry]:
        return await self._repo.list_ledger_entries(user_id)

    async def _commit(
        self,
        ledger: BalanceLedger,
        new_wallet: int,
        new_bonus: int,
        entry_type: LedgerEntryType,
        reference_id: str | None,
    ) -> BalanceLedger:
        assert new_wallet >= 0 and new_bonus >= 0, (
            f"negative pool for {ledger.user_id}: wallet={new_wallet} bonus={new_bonus}"
        )
        now = self._clock()
        updated = replace(
            ledger,
            wallet_cents=new_wallet,
            bonus_cents=new_bonus,
            version=ledger.version + 1,
            updated_at=now,
        )
        await self._repo.save_balance(ledger.user_id, updated)
        await self._repo.append_ledger_entry(
            LedgerEntry(
                id=str(uuid.uuid4()),
                user_id=ledger.user_id,
                entry_type=entry_type.value,
                wallet_delta=new_wallet - ledger.wallet_cents,
                bonus_delta=new_bonus - ledger.bonus_cents,
                wallet_after=new_wallet,
                bonus_after=new_bonus,
                reference_id=reference_id,
                created_at=now,
            )
        )
        return updated
