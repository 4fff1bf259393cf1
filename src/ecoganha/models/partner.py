"""Sponsoring partner model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base


class Partner(Base):
    """Business that publishes offers, bound to one partner account."""

    __tablename__ = "partners"
    __table_args__ = (UniqueConstraint("user_id", name="partners_user_unique"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    business_name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="partner")
    offers = relationship("Offer", back_populates="partner")
