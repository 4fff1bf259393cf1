"""Primary API router definition."""

from fastapi import APIRouter

from . import catalog, config, redemptions, transactions, users

api_router = APIRouter()

api_router.include_router(transactions.router)
api_router.include_router(redemptions.router)
api_router.include_router(config.router)
api_router.include_router(catalog.router)
api_router.include_router(users.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
