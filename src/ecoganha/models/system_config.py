"""Key/value system configuration model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from ..core.database import Base


class SystemConfig(Base):
    """Versioned global setting; each write bumps ``version``."""

    __tablename__ = "system_config"

    config_key = Column(String, primary_key=True)
    config_value = Column(String, nullable=False)
    description = Column(String)
    version = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
