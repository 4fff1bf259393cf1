"""Business rule failures shared by the service layer."""

from __future__ import annotations

import enum
from typing import Optional


class ConflictReason(str, enum.Enum):
    """Sub-classification of state conflicts."""

    INSUFFICIENT_POINTS = "insufficient_points"
    OUT_OF_STOCK = "out_of_stock"
    STOCK_TAKEN = "stock_taken"
    MATERIAL_NOT_ACCEPTED = "material_not_accepted"
    RATE_NOT_CONFIGURED = "rate_not_configured"
    OFFER_EXPIRED = "offer_expired"
    HAS_DEPENDENTS = "has_dependents"


class RuleViolation(Exception):
    """Raised when a business rule rejects an operation."""

    kind = "validation"
    status_code = 400

    def __init__(self, detail: str, reason: Optional[ConflictReason] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.reason = reason

    def as_detail(self) -> dict[str, Optional[str]]:
        return {
            "kind": self.kind,
            "reason": self.reason.value if self.reason else None,
            "message": self.detail,
        }


class InvalidRequest(RuleViolation):
    """Missing or malformed input."""

    kind = "validation"
    status_code = 422


class NotAuthorized(RuleViolation):
    """Caller is not bound to the resource it operates on."""

    kind = "authorization"
    status_code = 403


class NotFound(RuleViolation):
    kind = "not_found"
    status_code = 404


class Conflict(RuleViolation):
    """Operation clashes with current state."""

    kind = "conflict"
    status_code = 409

    def __init__(self, detail: str, reason: ConflictReason) -> None:
        super().__init__(detail, reason=reason)
