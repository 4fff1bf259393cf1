"""Domain logic for recycling deposits at eco points."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Sequence, Union

from sqlalchemy import distinct, exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..core.database import unit_of_work
from ..core.errors import Conflict, ConflictReason, NotAuthorized, NotFound
from ..models import (
    CountingMode,
    EcoPoint,
    Material,
    RecycleTransaction,
    User,
    eco_point_materials,
)
from ..utils.datetime import day_window, utc_naive
from . import counting_mode_service

logger = logging.getLogger(__name__)


@dataclass
class DepositResult:
    """Outcome of a committed deposit."""

    transaction: RecycleTransaction
    user: User
    counting_mode: CountingMode


async def _ensure_operated_eco_point(session: AsyncSession, eco_point_id: int, operator_id: int) -> EcoPoint:
    eco_point = await session.get(EcoPoint, eco_point_id)
    if eco_point is None:
        raise NotFound(f"Eco point {eco_point_id} not found")
    if eco_point.operator_id != operator_id:
        raise NotAuthorized("Operator is not authorized for this eco point.")
    return eco_point


async def _ensure_accepted_material(session: AsyncSession, eco_point: EcoPoint, material_id: int) -> Material:
    material = await session.get(Material, material_id)
    if material is None:
        raise NotFound(f"Material {material_id} not found")

    accepted_stmt = select(
        exists().where(
            eco_point_materials.c.eco_point_id == eco_point.id,
            eco_point_materials.c.material_id == material.id,
        )
    )
    if not (await session.execute(accepted_stmt)).scalar():
        raise Conflict(
            f"Eco point '{eco_point.name}' does not accept material '{material.name}'.",
            ConflictReason.MATERIAL_NOT_ACCEPTED,
        )
    return material


async def _ensure_user(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return user


async def _credit_points(session: AsyncSession, user_id: int, points: int) -> None:
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(points=User.points + points, updated_at=utc_naive())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount != 1:
        raise NotFound(f"User {user_id} not found")


async def record_deposit(
    session: AsyncSession,
    *,
    operator_id: int,
    user_id: int,
    material_id: int,
    eco_point_id: int,
    weight: Optional[Union[Decimal, float]] = None,
    quantity: Optional[int] = None,
) -> DepositResult:
    """Convert a deposit into points and credit them to the user.

    The counting mode is read once, up front, and drives which amount is
    required and which material rate applies. Every precondition is checked
    before the first write; the ledger insert and the balance credit then
    commit together or not at all.
    """

    mode = await counting_mode_service.get_counting_mode(session)
    amount = counting_mode_service.resolve_deposit_amount(mode, weight=weight, quantity=quantity)

    eco_point = await _ensure_operated_eco_point(session, eco_point_id, operator_id)
    material = await _ensure_accepted_material(session, eco_point, material_id)
    points = counting_mode_service.compute_points(amount, material)
    user = await _ensure_user(session, user_id)

    async with unit_of_work(session):
        transaction = RecycleTransaction(
            user_id=user.id,
            eco_point_id=eco_point.id,
            material_id=material.id,
            operator_id=operator_id,
            counting_mode=mode,
            weight=amount.weight,
            quantity=amount.quantity,
            points=points,
        )
        session.add(transaction)
        await session.flush()

        await _credit_points(session, user.id, points)
        await session.refresh(user)

        stmt = (
            select(RecycleTransaction)
            .options(joinedload(RecycleTransaction.material), joinedload(RecycleTransaction.eco_point))
            .where(RecycleTransaction.id == transaction.id)
        )
        transaction = (await session.execute(stmt)).scalar_one()

    logger.info(
        "deposit %s credited %s points to user %s at eco point %s (%s mode)",
        transaction.id,
        points,
        user.id,
        eco_point.id,
        mode.value,
    )
    return DepositResult(transaction=transaction, user=user, counting_mode=mode)


async def list_eco_point_transactions(
    session: AsyncSession,
    *,
    eco_point_id: int,
    operator_id: int,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[RecycleTransaction]:
    """Return deposits recorded at an eco point, newest first."""

    await _ensure_operated_eco_point(session, eco_point_id, operator_id)

    stmt = (
        select(RecycleTransaction)
        .options(joinedload(RecycleTransaction.material), joinedload(RecycleTransaction.user))
        .where(RecycleTransaction.eco_point_id == eco_point_id)
        .order_by(RecycleTransaction.created_at.desc(), RecycleTransaction.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return (await session.execute(stmt)).scalars().all()


async def list_user_transactions(
    session: AsyncSession,
    *,
    user_id: int,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[RecycleTransaction]:
    """Return a user's own deposits, newest first, with material and eco point names."""

    await _ensure_user(session, user_id)

    stmt = (
        select(RecycleTransaction)
        .options(joinedload(RecycleTransaction.material), joinedload(RecycleTransaction.eco_point))
        .where(RecycleTransaction.user_id == user_id)
        .order_by(RecycleTransaction.created_at.desc(), RecycleTransaction.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return (await session.execute(stmt)).scalars().all()

async def eco_point_stats(
    session: AsyncSession,
    *,
    eco_point_id: int,
    operator_id: int,
    current_time: datetime | None = None,
) -> dict[str, Any]:
    """Summarise today's activity and the all-time material mix of an eco point.

    Materials are ranked by points credited, which is comparable across
    weight-based and unit-based deposits.
    """

    await _ensure_operated_eco_point(session, eco_point_id, operator_id)

    now = current_time or datetime.now(timezone.utc)
    start, end = day_window(now)

    today_stmt = select(
        func.coalesce(func.sum(RecycleTransaction.weight), 0),
        func.coalesce(func.sum(RecycleTransaction.quantity), 0),
        func.coalesce(func.sum(RecycleTransaction.points), 0),
        func.count(distinct(RecycleTransaction.user_id)),
    ).where(
        RecycleTransaction.eco_point_id == eco_point_id,
        RecycleTransaction.created_at >= start,
        RecycleTransaction.created_at < end,
    )
    total_weight, total_quantity, total_points, users_served = (await session.execute(today_stmt)).one()

    material_points = func.coalesce(func.sum(RecycleTransaction.points), 0).label("total_points")
    distribution_stmt = (
        select(
            Material.name,
            func.coalesce(func.sum(RecycleTransaction.weight), 0),
            func.coalesce(func.sum(RecycleTransaction.quantity), 0),
            material_points,
        )
        .join(Material, Material.id == RecycleTransaction.material_id)
        .where(RecycleTransaction.eco_point_id == eco_point_id)
        .group_by(Material.id, Material.name)
        .order_by(material_points.desc(), Material.name.asc())
    )
    rows = (await session.execute(distribution_stmt)).all()
    grand_total = sum(int(row[3] or 0) for row in rows)

    distribution = []
    for name, weight, quantity, points in rows:
        points = int(points or 0)
        share = round(points * 100 / grand_total, 1) if grand_total else 0.0
        distribution.append(
            {
                "name": name,
                "total_weight": Decimal(str(weight or 0)),
                "total_quantity": int(quantity or 0),
                "total_points": points,
                "percentage": share,
            }
        )

    return {
        "total_weight_today": Decimal(str(total_weight or 0)),
        "total_quantity_today": int(total_quantity or 0),
        "points_distributed_today": int(total_points or 0),
        "users_served_today": int(users_served or 0),
        "most_recycled_material": distribution[0]["name"] if distribution else None,
        "material_distribution": distribution,
    }
