"""Repository Protocol for listings."""

from typing import Protocol

from src.ll_listing.domain.models import Listing


class ListingRepositoryProtocol(Protocol):
    async def get_listing(self, listing_id: str) -> Listing | None: ...

    async def save_listing(self, listing: Listing) -> None: ...

    async def list_listings(self) -> list[Listing]: ...
