"""Eco point (collection site) model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from ..core.database import Base

eco_point_materials = Table(
    "eco_point_materials",
    Base.metadata,
    Column("eco_point_id", Integer, ForeignKey("eco_points.id", ondelete="CASCADE"), primary_key=True),
    Column("material_id", Integer, ForeignKey("materials.id", ondelete="RESTRICT"), primary_key=True),
)


class EcoPoint(Base):
    """Recycling drop-off location run by a single operator account."""

    __tablename__ = "eco_points"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    address = Column(String)
    operator_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    operator = relationship("User", back_populates="operated_eco_points")
    materials = relationship("Material", secondary=eco_point_materials, back_populates="eco_points")
    recycle_transactions = relationship("RecycleTransaction", back_populates="eco_point")
