"""Recycling deposit ledger model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from ..core.database import Base
from .counting import CountingMode, DepositAmount, UnitAmount, WeightAmount


class RecycleTransaction(Base):
    """Immutable record of points credited for a deposit."""

    __tablename__ = "recycle_transactions"
    __table_args__ = (
        CheckConstraint("points >= 0", name="recycle_transactions_points_non_negative"),
        CheckConstraint(
            "(weight > 0 AND quantity = 0) OR (weight = 0 AND quantity > 0)",
            name="recycle_transactions_single_amount",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    eco_point_id = Column(Integer, ForeignKey("eco_points.id", ondelete="RESTRICT"), nullable=False)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False)
    operator_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    counting_mode = Column(
        SAEnum(CountingMode, name="counting_mode", values_callable=lambda modes: [m.value for m in modes]),
        nullable=False,
    )
    weight = Column(Numeric(10, 3), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id], back_populates="recycle_transactions")
    operator = relationship("User", foreign_keys=[operator_id])
    eco_point = relationship("EcoPoint", back_populates="recycle_transactions")
    material = relationship("Material", back_populates="recycle_transactions")

    @property
    def amount(self) -> DepositAmount:
        if self.counting_mode == CountingMode.UNIT:
            return UnitAmount(count=self.quantity)
        return WeightAmount(kg=Decimal(self.weight))
