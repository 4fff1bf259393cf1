"""Pydantic schemas for recycling deposits."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..models import CountingMode
from .common import CamelModel, UserSummary


class RecycleTransactionCreate(CamelModel):
    """Incoming payload for a deposit; the counting mode decides which amount is required."""

    user_id: int
    material_id: int
    eco_point_id: int
    weight: Optional[Decimal] = Field(None, description="Kilograms, required in weight mode.")
    quantity: Optional[int] = Field(None, description="Item count, required in unit mode.")


class RecycleTransactionRead(CamelModel):
    """Deposit ledger record joined with display names."""

    id: int
    counting_mode: CountingMode
    weight: Decimal
    quantity: int
    points: int
    created_at: datetime
    material_name: str
    eco_point_name: str


class DepositReceipt(CamelModel):
    """Response returned after a deposit is credited."""

    transaction: RecycleTransactionRead
    user: UserSummary
    counting_mode: CountingMode


class EcoPointTransactionRead(CamelModel):
    """Deposit as listed in an eco point's history."""

    id: int
    counting_mode: CountingMode
    weight: Decimal
    quantity: int
    points: int
    created_at: datetime
    material_name: str
    user_name: str
    user_phone: str


class MaterialShare(CamelModel):
    name: str
    total_weight: Decimal
    total_quantity: int
    total_points: int
    percentage: float = Field(..., description="Share of all points credited at the eco point.")


class EcoPointStats(CamelModel):
    """Daily activity and material mix of an eco point."""

    total_weight_today: Decimal
    total_quantity_today: int
    points_distributed_today: int
    users_served_today: int
    most_recycled_material: Optional[str]
    material_distribution: List[MaterialShare]
