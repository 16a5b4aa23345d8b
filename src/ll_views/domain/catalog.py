"""View packages offered to listing owners. Prices in cents; bigger packages cost less per view."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewPackage:
    id: str
    views: int
    price_cents: int


VIEW_PACKAGES: dict[str, ViewPackage] = {
    p.id: p
    for p in (
        ViewPackage("views-100", 100, 100),
        ViewPackage("views-500", 500, 400),
        ViewPackage("views-1000", 1000, 700),
        ViewPackage("views-2500", 2500, 1500),
        ViewPackage("views-5000", 5000, 2500),
    )
}
