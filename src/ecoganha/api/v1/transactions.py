"""Endpoints for recycling deposits."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db
from ...core.errors import RuleViolation
from ...models import User, UserRole
from ...schemas import (
    DepositReceipt,
    EcoPointStats,
    EcoPointTransactionRead,
    RecycleTransactionCreate,
    RecycleTransactionRead,
    UserSummary,
)
from ...services import recycle_service
from .deps import require_roles

router = APIRouter(prefix="/transactions", tags=["transactions"])

operator_only = require_roles(UserRole.OPERATOR)


@router.post(
    "",
    response_model=DepositReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Record a recycling deposit",
    responses={
        201: {
            "description": "Deposit credited",
            "content": {
                "application/json": {
                    "example": {
                        "transaction": {
                            "id": 42,
                            "countingMode": "weight",
                            "weight": "2.500",
                            "quantity": 0,
                            "points": 25,
                            "createdAt": "2025-11-12T10:15:30",
                            "materialName": "PET",
                            "ecoPointName": "Praça Central",
                        },
                        "user": {"id": 7, "name": "Ana Souza", "phone": "11999990000", "role": "regular", "points": 125},
                        "countingMode": "weight",
                    }
                }
            },
        },
        403: {"description": "Operator not bound to the eco point"},
        404: {"description": "User, material or eco point not found"},
        409: {"description": "Material not accepted or rate not configured"},
        422: {"description": "Missing or non-positive amount"},
    },
)
async def create_transaction(
    payload: RecycleTransactionCreate,
    operator: User = Depends(operator_only),
    db: AsyncSession = Depends(get_db),
) -> DepositReceipt:
    """Convert a deposit into points for the user.

    Example request body (weight mode)::

        {"userId": 7, "materialId": 1, "ecoPointId": 3, "weight": 2.5}
    """

    try:
        result = await recycle_service.record_deposit(
            db,
            operator_id=operator.id,
            user_id=payload.user_id,
            material_id=payload.material_id,
            eco_point_id=payload.eco_point_id,
            weight=payload.weight,
            quantity=payload.quantity,
        )
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc

    transaction = result.transaction
    return DepositReceipt(
        transaction=RecycleTransactionRead(
            id=transaction.id,
            counting_mode=transaction.counting_mode,
            weight=transaction.weight,
            quantity=transaction.quantity,
            points=transaction.points,
            created_at=transaction.created_at,
            material_name=transaction.material.name,
            eco_point_name=transaction.eco_point.name,
        ),
        user=UserSummary.model_validate(result.user),
        counting_mode=result.counting_mode,
    )


@router.get(
    "/eco-point/{eco_point_id}",
    response_model=List[EcoPointTransactionRead],
    summary="List deposits of an eco point",
)
async def list_eco_point_transactions(
    eco_point_id: int,
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    operator: User = Depends(operator_only),
    db: AsyncSession = Depends(get_db),
) -> List[EcoPointTransactionRead]:
    """Return the eco point's deposits, newest first."""

    try:
        transactions = await recycle_service.list_eco_point_transactions(
            db,
            eco_point_id=eco_point_id,
            operator_id=operator.id,
            limit=limit,
            offset=offset,
        )
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc

    response: List[EcoPointTransactionRead] = []
    for transaction in transactions:
        response.append(
            EcoPointTransactionRead(
                id=transaction.id,
                counting_mode=transaction.counting_mode,
                weight=transaction.weight,
                quantity=transaction.quantity,
                points=transaction.points,
                created_at=transaction.created_at,
                material_name=transaction.material.name,
                user_name=transaction.user.name,
                user_phone=transaction.user.phone,
            )
        )
    return response


@router.get(
    "/eco-point/{eco_point_id}/stats",
    response_model=EcoPointStats,
    summary="Eco point activity statistics",
)
async def get_eco_point_stats(
    eco_point_id: int,
    operator: User = Depends(operator_only),
    db: AsyncSession = Depends(get_db),
) -> EcoPointStats:
    """Return today's totals and the all-time material distribution."""

    try:
        stats = await recycle_service.eco_point_stats(db, eco_point_id=eco_point_id, operator_id=operator.id)
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc
    return EcoPointStats.model_validate(stats)
