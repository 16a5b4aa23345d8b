"""Listing packages used when an archived listing is renewed. Prices in cents."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RenewalPackage:
    id: str
    price_cents: int
    duration_days: int


RENEWAL_PACKAGES: dict[str, RenewalPackage] = {
    p.id: p
    for p in (
        RenewalPackage("free", 0, 3),
        RenewalPackage("standard", 300, 14),
        RenewalPackage("standard-30", 500, 30),
        RenewalPackage("premium", 800, 14),
        RenewalPackage("premium-30", 1400, 30),
        RenewalPackage("vip", 1200, 14),
        RenewalPackage("vip-30", 1800, 30),
    )
}
