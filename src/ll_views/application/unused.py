"""Per-owner ledger of purchased views that expired before they were delivered."""

import logging

from src.ll_common.locks import KeyedLocks
from src.ll_views.domain.repository import UnusedViewsRepositoryProtocol

logger = logging.getLogger(__name__)


class UnusedViewsLedger:
    def __init__(
        self, repo: UnusedViewsRepositoryProtocol, locks: KeyedLocks | None = None
    ) -> None:
        self._repo = repo
        self._locks = locks or KeyedLocks()

    async def get(self, user_id: str) -> int:
        return await self._repo.get_unused_views(user_id)

    async def add(self, user_id: str, views: int) -> int:
        """Accumulate views for user_id; returns the new total."""
        if views <= 0:
            return await self.get(user_id)
        async with self._locks.unused_views(user_id):
            total = await self._repo.get_unused_views(user_id) + views
            await self._repo.save_unused_views(user_id, total)
        logger.info("Unused views carried over: user=%s added=%d total=%d", user_id, views, total)
        return total

    async def take(self, user_id: str) -> int:
        """Return the accumulated views and zero the entry."""
        async with self._locks.unused_views(user_id):
            views = await self._repo.get_unused_views(user_id)
            if views > 0:
                await self._repo.save_unused_views(user_id, 0)
        return views

    async def restore(self, user_id: str, views: int) -> None:
        """Put back views taken by `take` when the transfer could not be saved."""
        await self.add(user_id, views)
