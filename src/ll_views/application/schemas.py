"""Commands and results for ll_views."""

from pydantic import BaseModel, Field, StrictInt, StrictStr

from config.settings import settings
from src.ll_common.commands import Command
from src.ll_common.errors import InvalidAmountError, InvalidViewCountError

MIN_VIEW_PURCHASE = 10
MAX_VIEW_PURCHASE = 100_000


class PurchaseViewsCommand(Command):
    listing_id: StrictStr = Field(..., min_length=1)
    view_count: StrictInt = Field(..., ge=MIN_VIEW_PURCHASE, le=MAX_VIEW_PURCHASE)
    price_per_view_cents: StrictInt = Field(default=settings.DEFAULT_PRICE_PER_VIEW_CENTS, gt=0)

    field_errors = {
        "view_count": InvalidViewCountError,
        "price_per_view_cents": lambda v: InvalidAmountError(
            f"price per view must be positive cents, got {v!r}"
        ),
    }

    @property
    def cost_cents(self) -> int:
        return self.view_count * self.price_per_view_cents


class PurchaseViewPackageCommand(Command):
    listing_id: StrictStr = Field(..., min_length=1)
    package_id: StrictStr = Field(..., min_length=1)


class ViewPurchaseResult(BaseModel):
    listing_id: str
    purchased_views: int
    target_views_for_featured: int
    charged_cents: int
    from_bonus_cents: int
    from_wallet_cents: int


class ViewCountResult(BaseModel):
    listing_id: str
    views: int
    target_reached: bool = False
    capped: bool = False
