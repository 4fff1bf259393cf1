"""Deletion endpoints guarded by ledger references."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db
from ...core.errors import RuleViolation
from ...models import User, UserRole
from ...services import catalog_service
from .deps import require_roles

router = APIRouter(tags=["catalog"])

_deletion_responses = {
    204: {"description": "Deleted"},
    404: {"description": "Not found"},
    409: {"description": "Referenced by ledger records"},
}


@router.delete(
    "/offers/{offer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an unredeemed offer",
    responses={**_deletion_responses, 403: {"description": "Offer belongs to another partner"}},
)
async def delete_offer(
    offer_id: int,
    partner: User = Depends(require_roles(UserRole.PARTNER)),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await catalog_service.delete_offer(db, offer_id=offer_id, partner_user_id=partner.id)
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/materials/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an unused material",
    responses=_deletion_responses,
)
async def delete_material(
    material_id: int,
    admin: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await catalog_service.delete_material(db, material_id=material_id)
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/eco-points/{eco_point_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an eco point without deposits",
    responses=_deletion_responses,
)
async def delete_eco_point(
    eco_point_id: int,
    admin: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await catalog_service.delete_eco_point(db, eco_point_id=eco_point_id)
    except RuleViolation as exc:
        await db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.as_detail()) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
