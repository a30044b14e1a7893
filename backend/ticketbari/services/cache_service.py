"""
Redis cache for public ticket listings.

Keys look like `tickets:list:g{generation}:{query}`. Any change that can
alter a listing (ticket create/update/delete, moderation, advertisement,
fraud cascade, confirmed payment) bumps the generation counter, so every
older key becomes unreachable at once and ages out through its TTL.

Single-ticket reads and seat maps are never cached: customers pick seats
from them.

Redis is advisory. When it is disabled or down every lookup is a miss; a
failed connection is not retried for RECONNECT_INTERVAL seconds so a dead
Redis does not add a timeout to each request.
"""

import json
import time
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ticketbari.core.config import get_settings
from ticketbari.core.logging import get_logger
from ticketbari.core.metrics import record_cache_operation

logger = get_logger(__name__)

LIST_PREFIX = "tickets:list:"
GENERATION_KEY = "tickets:list-generation"
RECONNECT_INTERVAL = 30.0

_client: Optional[redis.Redis] = None
_last_failure: float = 0.0


async def get_redis() -> Optional[redis.Redis]:
    """Shared client, or None when caching is off or Redis is unreachable."""
    global _client, _last_failure
    settings = get_settings()

    if not settings.REDIS_ENABLED:
        return None
    if _client is not None:
        return _client
    if _last_failure and time.monotonic() - _last_failure < RECONNECT_INTERVAL:
        return None

    client = redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        _last_failure = time.monotonic()
        logger.warning("redis_connection_failed", error=str(e), retry_in=RECONNECT_INTERVAL)
        await client.aclose()
        return None

    logger.info("redis_connected", url=settings.REDIS_URL)
    _client, _last_failure = client, 0.0
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def _generation(client: redis.Redis) -> str:
    return await client.get(GENERATION_KEY) or "0"


def make_ticket_list_key(**params: Any) -> str:
    """Stable key suffix for a listing query; None-valued params are left out."""
    return "&".join(f"{name}={params[name]}" for name in sorted(params) if params[name] is not None)


async def get_cached_tickets(query_key: str) -> Optional[dict]:
    client = await get_redis()
    if client is None:
        return None

    try:
        raw = await client.get(f"{LIST_PREFIX}g{await _generation(client)}:{query_key}")
    except RedisError as e:
        logger.error("cache_get_error", key=query_key, error=str(e))
        return None

    record_cache_operation("get", "hit" if raw else "miss")
    return json.loads(raw) if raw else None


async def set_cached_tickets(query_key: str, data: dict) -> None:
    client = await get_redis()
    if client is None:
        return

    try:
        key = f"{LIST_PREFIX}g{await _generation(client)}:{query_key}"
        await client.set(key, json.dumps(data, default=str), ex=get_settings().REDIS_CACHE_TTL)
        record_cache_operation("set", "ok")
    except RedisError as e:
        logger.error("cache_set_error", key=query_key, error=str(e))


async def invalidate_ticket_cache() -> None:
    client = await get_redis()
    if client is None:
        return

    try:
        generation = await client.incr(GENERATION_KEY)
        record_cache_operation("invalidate", "ok")
        logger.info("ticket_cache_invalidated", generation=generation)
    except RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    client = await get_redis()
    if client is None:
        return {"status": "disabled" if not get_settings().REDIS_ENABLED else "unavailable"}

    try:
        info = await client.info("stats")
        generation = await _generation(client)
    except RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "generation": int(generation),
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
