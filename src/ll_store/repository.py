"""The abstract store every component is written against.

Persistence technology is the deployer's choice; anything that satisfies
these three protocols can back the engine.
"""

from typing import Protocol

from src.ll_balance.domain.repository import BalanceRepositoryProtocol
from src.ll_listing.domain.repository import ListingRepositoryProtocol
from src.ll_views.domain.repository import UnusedViewsRepositoryProtocol


class RepositoryProtocol(
    ListingRepositoryProtocol,
    BalanceRepositoryProtocol,
    UnusedViewsRepositoryProtocol,
    Protocol,
):
    pass
