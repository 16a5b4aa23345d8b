"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
The in-memory store in ll_store provides a working implementation.
"""

from typing import Protocol

from src.ll_balance.domain.models import BalanceLedger, LedgerEntry


class BalanceRepositoryProtocol(Protocol):
    async def get_balance(self, user_id: str) -> BalanceLedger | None: ...

    async def save_balance(self, user_id: str, ledger: BalanceLedger) -> None: ...

    async def append_ledger_entry(self, entry: LedgerEntry) -> None: ...

    async def list_ledger_entries(self, user_id: str) -> list[LedgerEntry]: ...
