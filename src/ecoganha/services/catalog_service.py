"""Deletion guards for entities referenced by ledger records."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import unit_of_work
from ..core.errors import Conflict, ConflictReason, NotAuthorized, NotFound
from ..models import EcoPoint, Material, Offer, Partner, RecycleTransaction, Redemption, eco_point_materials

logger = logging.getLogger(__name__)


async def _count(session: AsyncSession, stmt) -> int:
    return int((await session.execute(stmt)).scalar_one())


async def _lock(session: AsyncSession, model, entity_id: int):
    stmt = select(model).where(model.id == entity_id).with_for_update()
    return (await session.execute(stmt)).scalar_one_or_none()


async def _delete_guarded(session: AsyncSession, stmt, message: str) -> None:
    # A ledger row committed after the count still trips the RESTRICT foreign key.
    try:
        await session.execute(stmt)
    except IntegrityError as exc:
        raise Conflict(message, ConflictReason.HAS_DEPENDENTS) from exc


async def delete_offer(session: AsyncSession, *, offer_id: int, partner_user_id: int) -> None:
    """Delete a partner's offer unless it has already been redeemed.

    The offer row is locked before redemptions are counted, so a redemption
    racing the delete waits on the same lock it takes in ``redeem_offer``.
    """

    async with unit_of_work(session):
        partner = (
            await session.execute(select(Partner).where(Partner.user_id == partner_user_id))
        ).scalar_one_or_none()
        if partner is None:
            raise NotFound(f"Partner for user {partner_user_id} not found")

        offer = await _lock(session, Offer, offer_id)
        if offer is None:
            raise NotFound(f"Offer {offer_id} not found")
        if offer.partner_id != partner.id:
            raise NotAuthorized("Offer does not belong to this partner.")

        redeemed = await _count(session, select(func.count(Redemption.id)).where(Redemption.offer_id == offer_id))
        if redeemed > 0:
            raise Conflict(
                f"Offer '{offer.title}' cannot be deleted: it has been redeemed {redeemed} time(s).",
                ConflictReason.HAS_DEPENDENTS,
            )

        await _delete_guarded(
            session,
            delete(Offer).where(Offer.id == offer_id),
            f"Offer '{offer.title}' cannot be deleted: it has been redeemed.",
        )
    logger.info("offer %s deleted by partner %s", offer_id, partner.id)


async def delete_material(session: AsyncSession, *, material_id: int) -> None:
    """Delete a material that no deposit or eco point refers to."""

    async with unit_of_work(session):
        material = await _lock(session, Material, material_id)
        if material is None:
            raise NotFound(f"Material {material_id} not found")

        deposits = await _count(
            session,
            select(func.count(RecycleTransaction.id)).where(RecycleTransaction.material_id == material_id),
        )
        if deposits > 0:
            raise Conflict(
                f"Material '{material.name}' cannot be deleted: it has {deposits} recycle transaction(s).",
                ConflictReason.HAS_DEPENDENTS,
            )

        sites = await _count(
            session,
            select(func.count())
            .select_from(eco_point_materials)
            .where(eco_point_materials.c.material_id == material_id),
        )
        if sites > 0:
            raise Conflict(
                f"Material '{material.name}' cannot be deleted: {sites} eco point(s) accept it.",
                ConflictReason.HAS_DEPENDENTS,
            )

        await _delete_guarded(
            session,
            delete(Material).where(Material.id == material_id),
            f"Material '{material.name}' cannot be deleted: it is referenced by other records.",
        )
    logger.info("material %s deleted", material_id)


async def delete_eco_point(session: AsyncSession, *, eco_point_id: int) -> None:
    """Delete an eco point and its accepted-material links if it has no deposits."""

    async with unit_of_work(session):
        eco_point = await _lock(session, EcoPoint, eco_point_id)
        if eco_point is None:
            raise NotFound(f"Eco point {eco_point_id} not found")

        deposits = await _count(
            session,
            select(func.count(RecycleTransaction.id)).where(RecycleTransaction.eco_point_id == eco_point_id),
        )
        if deposits > 0:
            raise Conflict(
                f"Eco point '{eco_point.name}' cannot be deleted: it has {deposits} recycle transaction(s).",
                ConflictReason.HAS_DEPENDENTS,
            )

        await session.execute(delete(eco_point_materials).where(eco_point_materials.c.eco_point_id == eco_point_id))
        await _delete_guarded(
            session,
            delete(EcoPoint).where(EcoPoint.id == eco_point_id),
            f"Eco point '{eco_point.name}' cannot be deleted: it has recycle transactions.",
        )
    logger.info("eco point %s deleted", eco_point_id)
