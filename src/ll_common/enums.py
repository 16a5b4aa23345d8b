"""Global enums."""

from enum import Enum


class AdType(str, Enum):
    FREE = "free"
    PREMIUM = "premium"
    FEATURED = "featured"
    VIP = "vip"


class BalancePool(str, Enum):
    WALLET = "wallet"
    BONUS = "bonus"


class LedgerEntryType(str, Enum):
    # Credits
    TOP_UP = "TOP_UP"
    BONUS_GRANT = "BONUS_GRANT"
    REFUND = "REFUND"
    # Debits
    PROMOTION = "PROMOTION"
    VIEW_PURCHASE = "VIEW_PURCHASE"
    CREATIVE_EFFECTS = "CREATIVE_EFFECTS"
    RENEWAL = "RENEWAL"


class NoticeKind(str, Enum):
    EXPIRY_7_DAYS = "EXPIRY_7_DAYS"
    EXPIRY_3_DAYS = "EXPIRY_3_DAYS"
    EXPIRY_1_DAY = "EXPIRY_1_DAY"
    UNUSED_VIEWS_SAVED = "UNUSED_VIEWS_SAVED"
    UNUSED_VIEWS_APPLIED = "UNUSED_VIEWS_APPLIED"
    VIEW_TARGET_REACHED = "VIEW_TARGET_REACHED"
    VIEWS_PURCHASED = "VIEWS_PURCHASED"
    EFFECTS_APPLIED = "EFFECTS_APPLIED"
    GRACE_ENDING = "GRACE_ENDING"
    GRACE_ENDED = "GRACE_ENDED"
    PROMOTION_ENDED = "PROMOTION_ENDED"
