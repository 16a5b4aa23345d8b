"""Commands and results for ll_promotion."""

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator

from src.ll_common.commands import Command
from src.ll_common.enums import AdType
from src.ll_common.errors import (
    InvalidAmountError,
    InvalidDurationError,
    InvalidPromotionTypeError,
)

MAX_PROMOTION_COST_CENTS = 100_000


class PromoteCommand(Command):
    listing_id: StrictStr = Field(..., min_length=1)
    promotion_type: AdType
    duration_days: StrictInt = Field(..., gt=0, le=365)
    cost_cents: StrictInt = Field(..., gt=0, le=MAX_PROMOTION_COST_CENTS)

    field_errors = {
        "promotion_type": InvalidPromotionTypeError,
        "duration_days": InvalidDurationError,
        "cost_cents": lambda v: InvalidAmountError(
            f"promotion cost must be within (0, {MAX_PROMOTION_COST_CENTS}] cents, got {v!r}"
        ),
    }

    @field_validator("promotion_type")
    @classmethod
    def _not_free(cls, v: AdType) -> AdType:
        if v is AdType.FREE:
            raise ValueError("free is not a promotion")
        return v


class PromotePackageCommand(Command):
    listing_id: StrictStr = Field(..., min_length=1)
    package_id: StrictStr = Field(..., min_length=1)


class PromotionResult(BaseModel):
    listing_id: str
    ad_type: AdType
    promotion_end_date: datetime
    grace_period_end_date: datetime | None
    charged_cents: int
    from_bonus_cents: int
    from_wallet_cents: int
    renewed: bool = False
