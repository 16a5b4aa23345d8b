"""Commands and results for ll_listing lifecycle operations."""

from datetime import datetime

from pydantic import BaseModel, Field, StrictStr

from src.ll_common.commands import Command


class ReactivateCommand(Command):
    listing_id: StrictStr = Field(..., min_length=1)
    package_id: StrictStr = Field(..., min_length=1)


class ReactivationResult(BaseModel):
    listing_id: str
    package_id: str
    expires_at: datetime
    charged_cents: int
    from_bonus_cents: int = 0
    from_wallet_cents: int = 0
