"""Integer arithmetic utilities for cents-based balances.

All prices, amounts, and balances use int (cents). No float, no Decimal.
"""

from src.ll_common.errors import InvalidAmountError


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '65.00 AZN', -1200 -> '-12.00 AZN'."""
    if cents < 0:
        abs_cents = -cents
        return f"-{abs_cents // 100:,}.{abs_cents % 100:02d} AZN"
    return f"{cents // 100:,}.{cents % 100:02d} AZN"


def require_cents(amount: object, *, upper: int | None = None) -> int:
    """Validate a positive integer cents amount, optionally bounded above.

    bool is rejected even though it subclasses int.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"expected integer cents, got {amount!r}")
    if amount <= 0:
        raise InvalidAmountError(f"must be positive, got {amount}")
    if upper is not None and amount > upper:
        raise InvalidAmountError(f"{amount} exceeds maximum {upper}")
    return amount
