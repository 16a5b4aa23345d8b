"""InMemoryRepository — process-local implementation of RepositoryProtocol.

Reads and writes deep-copy entities, so a caller mutating a loaded Listing
or BalanceLedger changes nothing until it calls save. This gives the same
"nothing persisted until save" behaviour a database-backed store would.
"""

import copy
from collections import defaultdict

from src.ll_balance.domain.models import BalanceLedger, LedgerEntry
from src.ll_listing.domain.models import Listing


class InMemoryRepository:
    def __init__(self) -> None:
        self._listings: dict[str, Listing] = {}
        self._balances: dict[str, BalanceLedger] = {}
        self._entries: dict[str, list[LedgerEntry]] = defaultdict(list)
        self._unused_views: dict[str, int] = {}

    # --- listings ---

    async def get_listing(self, listing_id: str) -> Listing | None:
        listing = self._listings.get(listing_id)
        return copy.deepcopy(listing) if listing is not None else None

    async def save_listing(self, listing: Listing) -> None:
        self._listings[listing.id] = copy.deepcopy(listing)

    async def list_listings(self) -> list[Listing]:
        return [copy.deepcopy(listing) for listing in self._listings.values()]

    # --- balances ---

    async def get_balance(self, user_id: str) -> BalanceLedger | None:
        ledger = self._balances.get(user_id)
        return copy.deepcopy(ledger) if ledger is not None else None

    async def save_balance(self, user_id: str, ledger: BalanceLedger) -> None:
        self._balances[user_id] = copy.deepcopy(ledger)

    async def append_ledger_entry(self, entry: LedgerEntry) -> None:
        self._entries[entry.user_id].append(copy.deepcopy(entry))

    async def list_ledger_entries(self, user_id: str) -> list[LedgerEntry]:
        # Newest first
        return [copy.deepcopy(e) for e in reversed(self._entries.get(user_id, []))]

    # --- unused views ---

    async def get_unused_views(self, user_id: str) -> int:
        return self._unused_views.get(user_id, 0)

    async def save_unused_views(self, user_id: str, views: int) -> None:
        if views < 0:
            raise ValueError(f"unused views cannot be negative: {views}")
        self._unused_views[user_id] = views
