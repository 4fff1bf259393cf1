"""SQLAlchemy models for EcoGanha."""

from .counting import CountingMode, DepositAmount, UnitAmount, WeightAmount
from .eco_point import EcoPoint, eco_point_materials
from .material import Material
from .offer import Offer
from .partner import Partner
from .recycle_transaction import RecycleTransaction
from .redemption import Redemption
from .system_config import SystemConfig
from .user import User, UserRole

__all__ = [
    "CountingMode",
    "DepositAmount",
    "EcoPoint",
    "Material",
    "Offer",
    "Partner",
    "RecycleTransaction",
    "Redemption",
    "SystemConfig",
    "UnitAmount",
    "User",
    "UserRole",
    "WeightAmount",
    "eco_point_materials",
]
