"""Pydantic schemas for ll_balance results."""

from pydantic import BaseModel

from src.ll_balance.domain.models import BalanceLedger
from src.ll_common.cents import cents_to_display


class BalanceResponse(BaseModel):
    user_id: str
    wallet_cents: int
    wallet_display: str
    bonus_cents: int
    bonus_display: str
    total_cents: int
    total_display: str

    @classmethod
    def from_ledger(cls, ledger: BalanceLedger) -> "BalanceResponse":
        return cls(
            user_id=ledger.user_id,
            wallet_cents=ledger.wallet_cents,
            wallet_display=cents_to_display(ledger.wallet_cents),
            bonus_cents=ledger.bonus_cents,
            bonus_display=cents_to_display(ledger.bonus_cents),
            total_cents=ledger.total_cents,
            total_display=cents_to_display(ledger.total_cents),
        )
