"""Counting mode and the deposit amount variants it selects."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Union


class CountingMode(str, enum.Enum):
    """How recycled amounts are measured platform-wide."""

    WEIGHT = "weight"
    UNIT = "unit"

    @property
    def description(self) -> str:
        if self is CountingMode.UNIT:
            return "Counting by unit"
        return "Counting by weight (kg)"


@dataclass(frozen=True)
class WeightAmount:
    """Deposit measured in kilograms."""

    kg: Decimal

    @property
    def weight(self) -> Decimal:
        return self.kg

    @property
    def quantity(self) -> int:
        return 0


@dataclass(frozen=True)
class UnitAmount:
    """Deposit measured as a count of items."""

    count: int

    @property
    def weight(self) -> Decimal:
        return Decimal(0)

    @property
    def quantity(self) -> int:
        return self.count


DepositAmount = Union[WeightAmount, UnitAmount]
