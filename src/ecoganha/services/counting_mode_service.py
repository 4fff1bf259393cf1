"""Counting-mode policy consulted by recycling deposits."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import unit_of_work
from ..core.errors import Conflict, ConflictReason, InvalidRequest
from ..models import CountingMode, DepositAmount, Material, SystemConfig, UnitAmount, WeightAmount
from ..utils.datetime import utc_naive

logger = logging.getLogger(__name__)

COUNTING_MODE_KEY = "counting_mode"
DEFAULT_COUNTING_MODE = CountingMode.WEIGHT

# Matches the recycle_transactions.weight column, Numeric(10, 3).
WEIGHT_STEP = Decimal("0.001")
MAX_WEIGHT = Decimal("10000000")


async def get_counting_mode(session: AsyncSession) -> CountingMode:
    """Read the committed counting mode, falling back to weight."""

    stmt = select(SystemConfig.config_value).where(SystemConfig.config_key == COUNTING_MODE_KEY)
    try:
        value = (await session.execute(stmt)).scalar_one_or_none()
    except SQLAlchemyError:
        await session.rollback()
        logger.warning("counting mode unreadable, using %s", DEFAULT_COUNTING_MODE.value, exc_info=True)
        return DEFAULT_COUNTING_MODE

    if value is None:
        return DEFAULT_COUNTING_MODE
    try:
        return CountingMode(value)
    except ValueError:
        logger.warning("unknown counting mode %r, using %s", value, DEFAULT_COUNTING_MODE.value)
        return DEFAULT_COUNTING_MODE


async def set_counting_mode(session: AsyncSession, mode: CountingMode) -> SystemConfig:
    """Persist a new counting mode and bump the setting's version."""

    async with unit_of_work(session):
        stmt = select(SystemConfig).where(SystemConfig.config_key == COUNTING_MODE_KEY).with_for_update()
        config = (await session.execute(stmt)).scalar_one_or_none()
        if config is None:
            config = SystemConfig(
                config_key=COUNTING_MODE_KEY,
                config_value=mode.value,
                description="Deposit measurement: weight or unit",
                version=1,
            )
            session.add(config)
        else:
            config.config_value = mode.value
            config.version += 1
            config.updated_at = utc_naive()
        await session.flush()

    logger.info("counting mode set to %s (version %s)", mode.value, config.version)
    return config


def resolve_deposit_amount(
    mode: CountingMode,
    *,
    weight: Optional[Union[Decimal, float, str]] = None,
    quantity: Optional[Union[int, Decimal, float]] = None,
) -> DepositAmount:
    """Pick the input field required by ``mode`` and validate it."""

    if mode is CountingMode.UNIT:
        if quantity is None:
            raise InvalidRequest("Quantity is required when counting by unit.")
        try:
            count = Decimal(str(quantity))
        except InvalidOperation as exc:
            raise InvalidRequest("Quantity must be a whole number.") from exc
        if count != count.to_integral_value():
            raise InvalidRequest("Quantity must be a whole number.")
        if count <= 0:
            raise InvalidRequest("Quantity must be greater than zero.")
        return UnitAmount(count=int(count))

    if weight is None:
        raise InvalidRequest("Weight is required when counting by weight.")
    try:
        kg = Decimal(str(weight))
    except InvalidOperation as exc:
        raise InvalidRequest("Weight must be a number.") from exc
    if not kg.is_finite() or kg <= 0:
        raise InvalidRequest("Weight must be greater than zero.")
    if kg >= MAX_WEIGHT:
        raise InvalidRequest("Weight is too large.")
    if kg != kg.quantize(WEIGHT_STEP):
        raise InvalidRequest("Weight supports at most 3 decimal places.")
    return WeightAmount(kg=kg.quantize(WEIGHT_STEP))


def compute_points(amount: DepositAmount, material: Material) -> int:
    """Convert a deposit into points using the material's rate for its mode."""

    if isinstance(amount, UnitAmount):
        if material.points_per_unit is None:
            raise Conflict(
                f"Material '{material.name}' has no points-per-unit rate configured.",
                ConflictReason.RATE_NOT_CONFIGURED,
            )
        return amount.count * int(material.points_per_unit)

    if material.points_per_kg is None:
        raise Conflict(
            f"Material '{material.name}' has no points-per-kg rate configured.",
            ConflictReason.RATE_NOT_CONFIGURED,
        )
    raw = amount.kg * Decimal(str(material.points_per_kg))
    return int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))
