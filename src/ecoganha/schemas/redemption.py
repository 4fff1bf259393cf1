"""Pydantic schemas for redemption workflows."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, UserSummary


class RedemptionCreate(CamelModel):
    """Incoming payload for redeeming an offer."""

    user_id: int
    offer_id: int


class RedemptionRead(CamelModel):
    """Represents a redemption joined with its offer and partner."""

    id: int
    points: int
    created_at: datetime
    offer_id: int
    title: str
    description: Optional[str]
    partner_name: str
    remaining_quantity: int = Field(..., ge=0)


class RedemptionReceipt(CamelModel):
    """Response returned after processing a redemption."""

    redemption: RedemptionRead
    user: UserSummary


class PartnerRedemptionRead(CamelModel):
    """Redemption as listed in a partner's history."""

    id: int
    points: int
    created_at: datetime
    offer_id: int
    title: str
    user_name: str
    user_phone: str


class UserRedemptionRead(CamelModel):
    """Redemption as listed in the user's own history."""

    id: int
    points: int
    created_at: datetime
    offer_id: int
    title: str
    description: Optional[str]
    partner_name: str
