"""Partner offer model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..core.database import Base


class Offer(Base):
    """Reward with a point cost and finite remaining quantity."""

    __tablename__ = "offers"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="offers_quantity_non_negative"),
        CheckConstraint("points > 0", name="offers_points_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    partner_id = Column(Integer, ForeignKey("partners.id", ondelete="RESTRICT"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(String)
    points = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    valid_until = Column(Date)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    partner = relationship("Partner", back_populates="offers")
    redemptions = relationship("Redemption", back_populates="offer")
