"""Domain models for ll_balance — pure dataclasses, no persistence dependency."""

from dataclasses import dataclass, field
from datetime import datetime

# Pool ceilings and single-transaction top-up caps, in cents
WALLET_CEILING = 100_000_000
BONUS_CEILING = 10_000_000
WALLET_CREDIT_CAP = 10_000_000
BONUS_CREDIT_CAP = 1_000_000


@dataclass
class BalanceLedger:
    user_id: str
    wallet_cents: int = 0
    bonus_cents: int = 0
    version: int = 0
    updated_at: datetime | None = None

    @property
    def total_cents(self) -> int:
        return self.wallet_cents + self.bonus_cents


@dataclass(frozen=True)
class DebitSplit:
    """How a successful debit was divided between the two pools."""

    from_bonus: int
    from_wallet: int

    @property
    def total(self) -> int:
        return self.from_bonus + self.from_wallet


def split_bonus_first(ledger: BalanceLedger, amount: int) -> DebitSplit | None:
    """Bonus first, then wallet for the remainder. None when the pools cannot cover amount."""
    if ledger.total_cents < amount:
        return None
    from_bonus = min(ledger.bonus_cents, amount)
    return DebitSplit(from_bonus=from_bonus, from_wallet=amount - from_bonus)


@dataclass
class LedgerEntry:
    id: str
    user_id: str
    entry_type: str                  # LedgerEntryType value
    wallet_delta: int                # cents, positive=income negative=expense
    bonus_delta: int
    wallet_after: int
    bonus_after: int
    reference_id: str | None = None
    created_at: datetime | None = None
    extra: dict[str, object] = field(default_factory=dict)
