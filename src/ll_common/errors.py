"""Unified error codes and custom exceptions.

Error kinds map to base classes so callers can catch by kind:
  InvalidInputError       1xxx  malformed or out-of-range amount, id, duration, type
  InsufficientBalanceError 2001 owner cannot afford the purchase
  NotFoundError           2xxx/3xxx  listing, balance or catalog package missing
  ConflictError           3xxx  listing deleted/expired/archived, duplicate ids

AlreadyInState conditions (re-promoting, re-archiving) are not raised;
they are logged at WARNING level and the operation proceeds.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class InvalidInputError(AppError):
    def __init__(self, message: str, code: int = 1001) -> None:
        super().__init__(code, message, 422)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class ConflictError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


# --- 1xxx: Input ---

class InvalidAmountError(InvalidInputError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid amount: {detail}", 1002)


class InvalidPromotionTypeError(InvalidInputError):
    def __init__(self, promotion_type: object) -> None:
        super().__init__(
            f"Invalid promotion type {promotion_type!r}: must be premium, featured or vip",
            1003,
        )


class InvalidDurationError(InvalidInputError):
    def __init__(self, duration_days: object) -> None:
        super().__init__(f"Duration must be within (0, 365] days, got {duration_days!r}", 1004)


class InvalidViewCountError(InvalidInputError):
    def __init__(self, view_count: object) -> None:
        super().__init__(f"View count must be within [10, 100000], got {view_count!r}", 1005)


class InvalidEffectError(InvalidInputError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid creative effects: {detail}", 1006)


# --- 2xxx: Balance ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


class BalanceNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Balance not found for user {user_id}")


# --- 3xxx: Listing ---

class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3001, f"Listing not found: {listing_id}")


class ListingDeletedError(ConflictError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3002, f"Listing is deleted: {listing_id}")


class ListingExpiredError(ConflictError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3003, f"Listing has expired: {listing_id}")


class ListingArchivedError(ConflictError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3004, f"Listing is archived: {listing_id}")


class ListingNotArchivedError(ConflictError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3005, f"Listing is not archived: {listing_id}")


class DuplicateEffectError(ConflictError):
    def __init__(self, effect_id: str) -> None:
        super().__init__(3006, f"Duplicate creative effect id: {effect_id}")


class PackageNotFoundError(NotFoundError):
    def __init__(self, package_id: str) -> None:
        super().__init__(3007, f"Package not found: {package_id}")


class ListingExistsError(ConflictError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3008, f"Listing already exists: {listing_id}")


# --- 9xxx: System ---

class PaymentConfirmationError(AppError):
    def __init__(self, detail: str = "Payment was not confirmed") -> None:
        super().__init__(9001, detail, 502)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
