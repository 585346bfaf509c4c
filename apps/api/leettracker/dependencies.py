from collections.abc import AsyncIterator
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from redis import asyncio as aioredis
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from leettracker.core.config import settings
from leettracker.db.session import get_session
from leettracker.services.cache import CacheService
from leettracker.services.storage import Storage, build_storage


async def get_db_session() -> AsyncIterator[AsyncSession]:
    async with get_session() as session:
        yield session


async def get_storage(session: AsyncSession = Depends(get_db_session)) -> Storage:
    return build_storage(session, settings.storage_backend)


_redis_client: Redis | None = None


async def get_redis_client() -> Redis | None:
    global _redis_client  # noqa: PLW0603
    if not settings.redis_url:
        return None
    if _redis_client is None:
        _redis_client = aioredis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


async def close_redis_client() -> None:
    global _redis_client  # noqa: PLW0603
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


async def get_cache_service(
    redis_client: Redis | None = Depends(get_redis_client),
) -> CacheService | None:
    if redis_client is None:
        return None
    return CacheService(redis_client)


async def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    Identity comes from the upstream auth proxy; local runs fall back to the
    configured default user.
    """

    user_id = (x_user_id or "").strip() or settings.default_user_id
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user_id


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
    x_user_email: Optional[str] = Header(default=None),
    x_user_first_name: Optional[str] = Header(default=None),
    x_user_last_name: Optional[str] = Header(default=None),
):
    return await storage.get_or_create_user(
        user_id,
        email=x_user_email,
        first_name=x_user_first_name,
        last_name=x_user_last_name,
    )
