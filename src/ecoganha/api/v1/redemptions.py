"""Endpoints for offer redemptions."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db
from ...core.errors import RuleViolation
from ...models import User, UserRole
from ...schemas import PartnerRedemptionRead, RedemptionCreate, RedemptionRead, RedemptionReceipt, UserSummary
from ...services import redemption_service
from .deps import require_roles

router = APIRouter(prefix="/redemptions", tags=["redemptions"])

partner_only = require_roles(UserRole.PARTNER)


@router.post(
    "",
    response_model=RedemptionReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Redeem an offer",
    responses={
        201: {
            "description": "Redemption completed",
            "content": {
                "application/json": {
                    "example": {
                        "redemption": {
                            "id": 88,
                            "points": 40,
                            "createdAt": "2025-11-12T14:30:00",
                            "offerId": 5,
                            "title": "Free coffee",
                            "description": "One espresso at any store",
                            "partnerName": "Café Verde",
                            "remainingQuantity": 9,
                        },
                        "user": {"id": 7, "name": "Ana Souza", "phone": "11999990000", "role": "regular", "points": 85},
                    }
                }
            },
        },
        403: {"description": "Offer belongs to another partner"},
        404: {"description": "Partner, offer or user not found"},
        409: {"description": "Insufficient points, out of stock, stock taken or offer expired"},
    },
)
async def redeem_offer(
    payload: RedemptionCreate,
    partner: User = Depends(partner_only),
    db: AsyncSession = Depends(get_db),
) -> RedemptionReceipt:
    """Spend the user's points on one unit of the partner's offer.

    Example request body::

        {"userId": 7, "offerId": 5}
    """

    try:
        result = await redemption_service.redeem_offer(
            db,
            partner_user_id=partner.id,
            user_id=payload.user_id,
            offer_id=payload.offer_id,
        )
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc

    redemption = result.redemption
    offer = redemption.offer
    return RedemptionReceipt(
        redemption=RedemptionRead(
            id=redemption.id,
            points=redemption.points,
            created_at=redemption.created_at,
            offer_id=offer.id,
            title=offer.title,
            description=offer.description,
            partner_name=offer.partner.business_name,
            remaining_quantity=offer.quantity,
        ),
        user=UserSummary.model_validate(result.user),
    )


@router.get(
    "/partner",
    response_model=List[PartnerRedemptionRead],
    summary="List redemptions of the partner's offers",
)
async def list_partner_redemptions(
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    partner: User = Depends(partner_only),
    db: AsyncSession = Depends(get_db),
) -> List[PartnerRedemptionRead]:
    """Return the partner's redemptions, newest first."""

    try:
        redemptions = await redemption_service.list_partner_redemptions(
            db,
            partner_user_id=partner.id,
            limit=limit,
            offset=offset,
        )
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc

    return [
        PartnerRedemptionRead(
            id=redemption.id,
            points=redemption.points,
            created_at=redemption.created_at,
            offer_id=redemption.offer_id,
            title=redemption.offer.title,
            user_name=redemption.user.name,
            user_phone=redemption.user.phone,
        )
        for redemption in redemptions
    ]
