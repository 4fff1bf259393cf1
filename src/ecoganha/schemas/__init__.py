"""Public schema exports."""

from .common import CamelModel, UserSummary
from .config import CountingModeRead
from .redemption import (
    PartnerRedemptionRead,
    RedemptionCreate,
    RedemptionRead,
    RedemptionReceipt,
    UserRedemptionRead,
)
from .transaction import (
    DepositReceipt,
    EcoPointStats,
    EcoPointTransactionRead,
    MaterialShare,
    RecycleTransactionCreate,
    RecycleTransactionRead,
)

__all__ = [
	"CamelModel",
	"CountingModeRead",
	"DepositReceipt",
	"EcoPointStats",
	"EcoPointTransactionRead",
	"MaterialShare",
	"PartnerRedemptionRead",
	"RecycleTransactionCreate",
	"RecycleTransactionRead",
	"RedemptionCreate",
	"RedemptionRead",
	"RedemptionReceipt",
	"UserRedemptionRead",
	"UserSummary",
]
