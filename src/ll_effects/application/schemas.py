"""Commands and results for ll_effects."""

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt, StrictStr

from src.ll_common.commands import Command
from src.ll_common.errors import InvalidEffectError

MAX_EFFECT_PRICE_CENTS = 10_000
MAX_EFFECTS_TOTAL_CENTS = 100_000


class EffectOrder(Command):
    id: StrictStr = Field(..., min_length=1)
    price_cents: StrictInt = Field(..., gt=0, le=MAX_EFFECT_PRICE_CENTS)
    duration_days: StrictInt = Field(..., gt=0, le=365)


class ApplyEffectsCommand(Command):
    listing_id: StrictStr = Field(..., min_length=1)
    effects: list[EffectOrder] = Field(..., min_length=1)

    field_errors = {
        "effects": lambda v: InvalidEffectError(
            "each effect needs an id, a price within (0, 10000] cents "
            "and a duration within (0, 365] days"
        ),
    }

    @property
    def total_cents(self) -> int:
        return sum(e.price_cents for e in self.effects)


class AppliedEffect(BaseModel):
    id: str
    price_cents: int
    end_date: datetime


class EffectsResult(BaseModel):
    listing_id: str
    effects: list[AppliedEffect]
    charged_cents: int
    from_bonus_cents: int
    from_wallet_cents: int
