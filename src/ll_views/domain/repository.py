"""Repository Protocol for the per-owner unused views ledger."""

from typing import Protocol


class UnusedViewsRepositoryProtocol(Protocol):
    async def get_unused_views(self, user_id: str) -> int: ...

    async def save_unused_views(self, user_id: str, views: int) -> None: ...
