"""Redemption ledger model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from ..core.database import Base


class Redemption(Base):
    """Immutable record of points spent on one unit of an offer."""

    __tablename__ = "redemptions"
    __table_args__ = (CheckConstraint("points > 0", name="redemptions_points_positive"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    offer_id = Column(Integer, ForeignKey("offers.id", ondelete="RESTRICT"), nullable=False)
    points = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="redemptions")
    offer = relationship("Offer", back_populates="redemptions")
