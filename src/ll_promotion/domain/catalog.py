"""Promotion packages offered to listing owners. Prices in cents."""

from dataclasses import dataclass

from src.ll_common.enums import AdType


@dataclass(frozen=True)
class PromotionPackage:
    id: str
    ad_type: AdType
    price_cents: int
    duration_days: int


PROMOTION_PACKAGES: dict[str, PromotionPackage] = {
    p.id: p
    for p in (
        PromotionPackage("featured-7", AdType.FEATURED, 200, 7),
        PromotionPackage("featured-14", AdType.FEATURED, 300, 14),
        PromotionPackage("premium-7", AdType.PREMIUM, 500, 7),
        PromotionPackage("premium-14", AdType.PREMIUM, 800, 14),
        PromotionPackage("vip-7", AdType.VIP, 800, 7),
        PromotionPackage("vip-14", AdType.VIP, 1200, 14),
        PromotionPackage("vip-30", AdType.VIP, 1800, 30),
    )
}
