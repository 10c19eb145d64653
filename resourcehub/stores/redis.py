"""Redis store for caching, sign-in sessions and OAuth state.

Handles:
- Caching with TTL policies
- Persisted sign-in sessions (opaque token -> principal JSON)
- Single-use OAuth state values

Cache helpers let Redis errors through; callers log them and fall back to
the database. Sessions and OAuth state have no fallback, so there an
unreachable Redis raises StoreUnavailableError.

TTL policies:
- Popular page cache: configurable, seconds
- OAuth state: 10 minutes
- Sessions: Settings.session_max_age (30 days by default)
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from resourcehub.settings import get_settings
from resourcehub.stores.postgres import StoreUnavailableError

# TTL constants (in seconds)
TTL_OAUTH_STATE = 600  # 10 minutes

# Key prefixes
PREFIX_POPULAR = "popular:"
PREFIX_SESSION = "session:"
PREFIX_OAUTH_STATE = "oauth_state:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get(key: str) -> str | None:
    """Get value from cache.

    Args:
        key: Cache key.

    Returns:
        Cached value or None if not found.
    """
    return await _get_redis().get(key)


async def cache_set(key: str, value: str, ttl: int) -> None:
    """Set value in cache with TTL.

    Args:
        key: Cache key.
        value: Value to cache.
        ttl: Time-to-live in seconds.
    """
    await _get_redis().setex(key, ttl, value)


async def cache_get_json(key: str) -> Any | None:
    """Get JSON value from cache.

    Returns:
        Parsed JSON or None if not found.
    """
    value = await cache_get(key)
    if value:
        return json.loads(value)
    return None


async def cache_set_json(key: str, value: Any, ttl: int) -> None:
    """Set JSON value in cache."""
    await cache_set(key, json.dumps(value), ttl)


# ============================================================
# Popular listing cache
# ============================================================


async def get_popular_page_cache(page: int, page_size: int) -> list[dict[str, Any]] | None:
    """Get a cached popular page."""
    return await cache_get_json(f"{PREFIX_POPULAR}{page_size}:{page}")


async def set_popular_page_cache(
    page: int,
    page_size: int,
    items: list[dict[str, Any]],
    ttl: int,
) -> None:
    """Cache a popular page for a short TTL."""
    await cache_set_json(f"{PREFIX_POPULAR}{page_size}:{page}", items, ttl)


async def clear_popular_cache() -> int:
    """Drop every cached popular page.

    Returns:
        Number of keys deleted.
    """
    client = _get_redis()
    keys = [key async for key in client.scan_iter(match=f"{PREFIX_POPULAR}*")]
    if not keys:
        return 0
    return await client.delete(*keys)


# ============================================================
# Sign-in sessions
# ============================================================


@asynccontextmanager
async def _required() -> AsyncIterator[redis.Redis]:
    """Redis client for calls that cannot fall back to anything else."""
    try:
        yield _get_redis()
    except (RuntimeError, RedisError) as e:
        raise StoreUnavailableError(f"Redis unavailable: {e}") from e


async def save_session(token: str, data: dict[str, Any], ttl: int) -> None:
    """Persist a sign-in session under its opaque token.

    Args:
        token: Session token (the cookie value).
        data: Principal payload (email, name, image).
        ttl: Session lifetime in seconds.

    Raises:
        StoreUnavailableError: If Redis is not reachable.
    """
    async with _required() as client:
        await client.setex(f"{PREFIX_SESSION}{token}", ttl, json.dumps(data))


async def load_session(token: str) -> dict[str, Any] | None:
    """Load a sign-in session, or None if it expired or never existed.

    Raises:
        StoreUnavailableError: If Redis is not reachable.
    """
    async with _required() as client:
        value = await client.get(f"{PREFIX_SESSION}{token}")
    if value:
        return json.loads(value)
    return None


async def delete_session(token: str) -> None:
    """Drop a sign-in session."""
    async with _required() as client:
        await client.delete(f"{PREFIX_SESSION}{token}")


# ============================================================
# OAuth state (CSRF protection for the authorize round-trip)
# ============================================================


async def save_oauth_state(state: str, ttl: int = TTL_OAUTH_STATE) -> None:
    """Remember an issued OAuth state value."""
    async with _required() as client:
        await client.set(f"{PREFIX_OAUTH_STATE}{state}", "1", nx=True, ex=ttl)


async def consume_oauth_state(state: str) -> bool:
    """Consume an OAuth state value.

    Returns:
        True if the state was issued by us and not used yet.
    """
    async with _required() as client:
        removed = await client.delete(f"{PREFIX_OAUTH_STATE}{state}")
    return removed == 1
