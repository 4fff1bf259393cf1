"""User account model."""

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base


class UserRole(str, enum.Enum):
    """Account roles resolved by the caller context."""

    REGULAR = "regular"
    OPERATOR = "operator"
    PARTNER = "partner"
    ADMIN = "admin"


class User(Base):
    """Represents any account on the platform, including point holders."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("phone", name="users_phone_unique"),
        CheckConstraint("points >= 0", name="users_points_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    role = Column(
        SAEnum(UserRole, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.REGULAR,
    )
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    partner = relationship("Partner", back_populates="user", uselist=False)
    operated_eco_points = relationship("EcoPoint", back_populates="operator")
    recycle_transactions = relationship(
        "RecycleTransaction",
        foreign_keys="RecycleTransaction.user_id",
        back_populates="user",
    )
    redemptions = relationship("Redemption", back_populates="user")
