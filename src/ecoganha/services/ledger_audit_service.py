"""Reconciliation of user balances against the points ledger."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import RecycleTransaction, Redemption, User

logger = logging.getLogger(__name__)


async def reconcile_balances(session: AsyncSession) -> dict[str, int]:
    """Compare each stored balance with credits minus debits in the ledger.

    Read-only; drift is logged and summarised, never corrected.
    """

    credited = (
        select(RecycleTransaction.user_id, func.sum(RecycleTransaction.points).label("total"))
        .group_by(RecycleTransaction.user_id)
        .subquery()
    )
    debited = (
        select(Redemption.user_id, func.sum(Redemption.points).label("total"))
        .group_by(Redemption.user_id)
        .subquery()
    )
    stmt = (
        select(
            User.id,
            User.points,
            func.coalesce(credited.c.total, 0),
            func.coalesce(debited.c.total, 0),
        )
        .outerjoin(credited, credited.c.user_id == User.id)
        .outerjoin(debited, debited.c.user_id == User.id)
        .order_by(User.id)
    )

    summary = {"users_checked": 0, "users_drifted": 0, "total_drift": 0}
    for user_id, balance, credits, debits in (await session.execute(stmt)).all():
        summary["users_checked"] += 1
        expected = int(credits) - int(debits)
        drift = int(balance) - expected
        if drift:
            summary["users_drifted"] += 1
            summary["total_drift"] += abs(drift)
            logger.warning("user %s balance %s differs from ledger total %s", user_id, balance, expected)

    return summary
