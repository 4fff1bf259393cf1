"""Request-scoped caller context."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.database import get_db
from ...models import User, UserRole


async def get_actor(
    x_actor_id: Optional[int] = Header(None, description="Identifier of the authenticated caller"),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the calling user established by the authentication layer."""

    if x_actor_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Caller identity not provided")
    actor = await db.get(User, x_actor_id)
    if actor is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown caller")
    return actor


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[User]]:
    """Dependency factory restricting a route to the given account roles."""

    async def _check(actor: User = Depends(get_actor)) -> User:
        if actor.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access not allowed for this account type",
            )
        return actor

    return _check
