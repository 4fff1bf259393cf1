"""Domain logic for redeeming offers with user points."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..core.database import unit_of_work
from ..core.errors import Conflict, ConflictReason, NotAuthorized, NotFound
from ..models import Offer, Partner, Redemption, User
from ..utils.datetime import utc_naive

logger = logging.getLogger(__name__)


@dataclass
class RedemptionResult:
    """Outcome of a committed redemption."""

    redemption: Redemption
    user: User


async def _ensure_partner(session: AsyncSession, partner_user_id: int) -> Partner:
    stmt = select(Partner).where(Partner.user_id == partner_user_id)
    partner = (await session.execute(stmt)).scalar_one_or_none()
    if partner is None:
        raise NotFound(f"Partner for user {partner_user_id} not found")
    return partner


async def _ensure_owned_offer(session: AsyncSession, offer_id: int, partner: Partner) -> Offer:
    offer = await session.get(Offer, offer_id)
    if offer is None:
        raise NotFound(f"Offer {offer_id} not found")
    if offer.partner_id != partner.id:
        raise NotAuthorized("Offer does not belong to this partner.")
    return offer


async def _ensure_user(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return user


async def _lock_offer_stock(session: AsyncSession, offer_id: int) -> int:
    stmt = select(Offer.quantity).where(Offer.id == offer_id).with_for_update()
    return (await session.execute(stmt)).scalar_one()


async def _debit_points(session: AsyncSession, user: User, points: int) -> None:
    stmt = (
        update(User)
        .where(User.id == user.id, User.points >= points)
        .values(points=User.points - points, updated_at=utc_naive())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount != 1:
        raise Conflict(
            f"Insufficient points. The offer requires {points} points.",
            ConflictReason.INSUFFICIENT_POINTS,
        )


async def _take_one_unit(session: AsyncSession, offer: Offer) -> None:
    stmt = (
        update(Offer)
        .where(Offer.id == offer.id, Offer.quantity > 0)
        .values(quantity=Offer.quantity - 1, updated_at=utc_naive())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount != 1:
        raise Conflict(
            f"Offer '{offer.title}' just became unavailable.",
            ConflictReason.STOCK_TAKEN,
        )


async def redeem_offer(
    session: AsyncSession,
    *,
    partner_user_id: int,
    user_id: int,
    offer_id: int,
    today: date | None = None,
) -> RedemptionResult:
    """Exchange a user's points for one unit of a partner's offer.

    Stock is checked optimistically before the transaction starts, then
    re-read under a row lock. A second redeemer that passed the first check
    against the last unit is rejected with ``stock_taken`` rather than
    ``out_of_stock``.
    """

    partner = await _ensure_partner(session, partner_user_id)
    offer = await _ensure_owned_offer(session, offer_id, partner)

    if offer.quantity <= 0:
        raise Conflict(f"Offer '{offer.title}' is out of stock.", ConflictReason.OUT_OF_STOCK)

    current_day = today or datetime.now(timezone.utc).date()
    if offer.valid_until is not None and offer.valid_until < current_day:
        raise Conflict(f"Offer '{offer.title}' expired on {offer.valid_until}.", ConflictReason.OFFER_EXPIRED)

    user = await _ensure_user(session, user_id)
    if user.points < offer.points:
        raise Conflict(
            f"Insufficient points. The user has {user.points} points, "
            f"but the offer requires {offer.points} points.",
            ConflictReason.INSUFFICIENT_POINTS,
        )

    async with unit_of_work(session):
        remaining = await _lock_offer_stock(session, offer.id)
        if remaining <= 0:
            raise Conflict(f"Offer '{offer.title}' just became unavailable.", ConflictReason.STOCK_TAKEN)

        redemption = Redemption(user_id=user.id, offer_id=offer.id, points=offer.points)
        session.add(redemption)
        await session.flush()

        await _debit_points(session, user, offer.points)
        await _take_one_unit(session, offer)

        await session.refresh(user)
        await session.refresh(offer)

        stmt = (
            select(Redemption)
            .options(joinedload(Redemption.offer).joinedload(Offer.partner))
            .where(Redemption.id == redemption.id)
        )
        redemption = (await session.execute(stmt)).scalar_one()

    logger.info(
        "redemption %s spent %s points of user %s on offer %s (%s left)",
        redemption.id,
        redemption.points,
        user.id,
        offer.id,
        offer.quantity,
    )
    return RedemptionResult(redemption=redemption, user=user)


async def list_partner_redemptions(
    session: AsyncSession,
    *,
    partner_user_id: int,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[Redemption]:
    """Return redemptions of the partner's offers, newest first."""

    partner = await _ensure_partner(session, partner_user_id)

    stmt = (
        select(Redemption)
        .join(Offer, Offer.id == Redemption.offer_id)
        .options(joinedload(Redemption.offer), joinedload(Redemption.user))
        .where(Offer.partner_id == partner.id)
        .order_by(Redemption.created_at.desc(), Redemption.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return (await session.execute(stmt)).scalars().all()


async def list_user_redemptions(
    session: AsyncSession,
    *,
    user_id: int,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[Redemption]:
    """Return a user's own redemptions, newest first, with offer and partner details."""

    await _ensure_user(session, user_id)

    stmt = (
        select(Redemption)
        .options(joinedload(Redemption.offer).joinedload(Offer.partner))
        .where(Redemption.user_id == user_id)
        .order_by(Redemption.created_at.desc(), Redemption.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return (await session.execute(stmt)).scalars().all()
