"""Notification titles and bodies.

Bodies reference the listing by title, falling back to "Your listing".
"""

from dataclasses import dataclass

from src.ll_common.enums import NoticeKind

# days remaining -> (kind, renewal discount percent)
EXPIRY_THRESHOLDS: dict[int, tuple[NoticeKind, int]] = {
    7: (NoticeKind.EXPIRY_7_DAYS, 15),
    3: (NoticeKind.EXPIRY_3_DAYS, 10),
    1: (NoticeKind.EXPIRY_1_DAY, 5),
}


@dataclass(frozen=True)
class Notification:
    user_id: str
    kind: NoticeKind
    title: str
    body: str
    listing_id: str | None = None


def _name(listing_title: str) -> str:
    return f'"{listing_title}"' if listing_title else "Your listing"


def expiry_notice(user_id: str, listing_id: str, listing_title: str, days: int) -> Notification:
    kind, discount = EXPIRY_THRESHOLDS[days]
    if days == 1:
        title = "Last day! Your listing expires tomorrow"
        body = (
            f"{_name(listing_title)} expires TOMORROW. "
            f"Renew right away to get a {discount}% discount."
        )
    else:
        title = f"Listing expires in {days} days"
        body = (
            f"{_name(listing_title)} expires in {days} days. "
            f"Renew now to get a {discount}% discount."
        )
    return Notification(user_id, kind, title, body, listing_id)


def unused_views_saved(user_id: str, listing_id: str, listing_title: str, views: int) -> Notification:
    return Notification(
        user_id,
        NoticeKind.UNUSED_VIEWS_SAVED,
        "Unused views saved",
        f"{_name(listing_title)} was archived before reaching its view target. "
        f"{views} unused views will be applied automatically to your next listing.",
        listing_id,
    )


def unused_views_applied(user_id: str, listing_id: str, views: int) -> Notification:
    return Notification(
        user_id,
        NoticeKind.UNUSED_VIEWS_APPLIED,
        "Views applied automatically",
        f"{views} unused views were applied to your new listing.",
        listing_id,
    )


def view_target_reached(user_id: str, listing_id: str, listing_title: str) -> Notification:
    return Notification(
        user_id,
        NoticeKind.VIEW_TARGET_REACHED,
        "Top placement ended",
        f"{_name(listing_title)} reached its purchased view count and left the top placement.",
        listing_id,
    )


def views_purchased(user_id: str, listing_id: str, views: int, target: int) -> Notification:
    return Notification(
        user_id,
        NoticeKind.VIEWS_PURCHASED,
        "Views purchased",
        f"{views} views purchased. Your listing stays in the top placement "
        f"until it reaches {target} views.",
        listing_id,
    )


def effects_applied(user_id: str, listing_id: str, count: int) -> Notification:
    return Notification(
        user_id,
        NoticeKind.EFFECTS_APPLIED,
        "Creative effects applied",
        f"{count} creative effects were applied to your listing.",
        listing_id,
    )


def grace_ending(user_id: str, listing_id: str, listing_title: str, days: int) -> Notification:
    return Notification(
        user_id,
        NoticeKind.GRACE_ENDING,
        "Grace period ending",
        f"The grace period of {_name(listing_title)} ends in {days} day(s).",
        listing_id,
    )


def grace_ended(user_id: str, listing_id: str, listing_title: str) -> Notification:
    return Notification(
        user_id,
        NoticeKind.GRACE_ENDED,
        "Grace period ended",
        f"The grace period of {_name(listing_title)} has ended; it is now a regular listing.",
        listing_id,
    )


def promotion_ended(user_id: str, listing_id: str, listing_title: str) -> Notification:
    return Notification(
        user_id,
        NoticeKind.PROMOTION_ENDED,
        "Promotion ended",
        f"The promotion of {_name(listing_title)} has ended; it is now a regular listing.",
        listing_id,
    )
