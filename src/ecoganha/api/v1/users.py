"""Endpoints for the calling user's own ledger history."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db
from ...core.errors import RuleViolation
from ...models import User
from ...schemas import RecycleTransactionRead, UserRedemptionRead
from ...services import recycle_service, redemption_service
from .deps import get_actor

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/recycle-history",
    response_model=List[RecycleTransactionRead],
    summary="List the caller's deposits",
)
async def get_recycle_history(
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    actor: User = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> List[RecycleTransactionRead]:
    """Return the caller's deposits, newest first."""

    try:
        transactions = await recycle_service.list_user_transactions(
            db,
            user_id=actor.id,
            limit=limit,
            offset=offset,
        )
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc

    return [
        RecycleTransactionRead(
            id=transaction.id,
            counting_mode=transaction.counting_mode,
            weight=transaction.weight,
            quantity=transaction.quantity,
            points=transaction.points,
            created_at=transaction.created_at,
            material_name=transaction.material.name,
            eco_point_name=transaction.eco_point.name,
        )
        for transaction in transactions
    ]


@router.get(
    "/redemption-history",
    response_model=List[UserRedemptionRead],
    summary="List the caller's redemptions",
)
async def get_redemption_history(
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    actor: User = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> List[UserRedemptionRead]:
    """Return the caller's redemptions, newest first."""

    try:
        redemptions = await redemption_service.list_user_redemptions(
            db,
            user_id=actor.id,
            limit=limit,
            offset=offset,
        )
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc

    return [
        UserRedemptionRead(
            id=redemption.id,
            points=redemption.points,
            created_at=redemption.created_at,
            offer_id=redemption.offer_id,
            title=redemption.offer.title,
            description=redemption.offer.description,
            partner_name=redemption.offer.partner.business_name,
        )
        for redemption in redemptions
    ]
