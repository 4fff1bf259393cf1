"""Recyclable material model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base


class Material(Base):
    """Material with its conversion rates for each counting mode."""

    __tablename__ = "materials"
    __table_args__ = (
        UniqueConstraint("name", name="materials_name_unique"),
        CheckConstraint("points_per_kg IS NULL OR points_per_kg >= 0", name="materials_points_per_kg_positive"),
        CheckConstraint("points_per_unit IS NULL OR points_per_unit >= 0", name="materials_points_per_unit_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(String)
    points_per_kg = Column(Numeric(10, 2))
    points_per_unit = Column(Integer)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    eco_points = relationship("EcoPoint", secondary="eco_point_materials", back_populates="materials")
    recycle_transactions = relationship("RecycleTransaction", back_populates="material")
