"""Database session and metadata configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import get_settings
from .errors import RuleViolation

logger = logging.getLogger(__name__)

settings = get_settings()

engine = create_async_engine(settings.database_url, echo=settings.sql_echo, future=True)
SessionLocal = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for request lifetime."""

    db = SessionLocal()
    try:
        yield db
    finally:
        await db.close()


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything written inside the block, or roll all of it back."""

    try:
        yield session
        await session.commit()
    except RuleViolation as exc:
        await session.rollback()
        logger.warning("transaction rolled back: %s", exc.detail)
        raise
    except Exception:
        await session.rollback()
        logger.exception("transaction rolled back after unexpected failure")
        raise
