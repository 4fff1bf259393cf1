"""System configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db
from ...schemas import CountingModeRead
from ...services import counting_mode_service

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/counting-mode", response_model=CountingModeRead, summary="Current counting mode")
async def get_counting_mode(db: AsyncSession = Depends(get_db)) -> CountingModeRead:
    """Return whether deposits are currently measured by weight or by unit."""

    mode = await counting_mode_service.get_counting_mode(db)
    return CountingModeRead(counting_mode=mode, description=mode.description)
