"""Service layer exports."""

from . import (
	catalog_service,
	counting_mode_service,
	ledger_audit_service,
	recycle_service,
	redemption_service,
)

__all__ = [
	"catalog_service",
	"counting_mode_service",
	"ledger_audit_service",
	"recycle_service",
	"redemption_service",
]
