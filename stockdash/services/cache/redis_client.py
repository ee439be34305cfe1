"""
Redis cache client for composed series responses.

Indicator computation over several years of bars is repeated on every
request inside the freshness window; the composed result is cached here.
Keys include the record's refresh timestamp, so a refresh never serves
an outdated composition.
"""

import json
import logging
import time
from datetime import datetime
from typing import Optional, Dict, Any, Tuple

import redis.asyncio as redis

from stockdash.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis(url: str = None) -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    url = url or settings.redis_url
    try:
        _redis_pool = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis connection closed")


def series_key(symbol: str, refreshed_at: Optional[datetime]) -> str:
    stamp = refreshed_at.isoformat() if refreshed_at else "never"
    return f"series:{symbol.upper()}:{stamp}"


class SeriesCache:
    """
    Redis-based cache for composed series payloads.

    Keys:
    - series:{symbol}:{refreshed_at iso} -> JSON SeriesResult

    The in-memory fallback holds one entry per symbol; a different
    refresh timestamp is a miss and is overwritten on the next set.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, ttl: int = None):
        self._redis = redis_client
        self.ttl = ttl if ttl is not None else settings.series_cache_ttl_seconds
        # In-memory fallback when Redis is unavailable: symbol -> (key, value, expires_at)
        self._memory_cache: Dict[str, Tuple[str, str, float]] = {}

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    def _purge_expired(self, now: float) -> None:
        expired = [s for s, (_, _, expires_at) in self._memory_cache.items() if expires_at < now]
        for symbol in expired:
            del self._memory_cache[symbol]

    def _memory_get(self, symbol: str, key: str) -> Optional[str]:
        """Fallback to memory cache."""
        entry = self._memory_cache.get(symbol)
        if entry is None:
            return None
        cached_key, value, expires_at = entry
        if expires_at < time.monotonic():
            del self._memory_cache[symbol]
            return None
        if cached_key != key:
            return None
        return value

    def _memory_set(self, symbol: str, key: str, value: str, ex: int):
        """Fallback to memory cache."""
        now = time.monotonic()
        self._purge_expired(now)
        self._memory_cache[symbol] = (key, value, now + ex)

    async def get(
        self, symbol: str, refreshed_at: Optional[datetime]
    ) -> Optional[Dict[str, Any]]:
        """Cached payload for a symbol at a given refresh, or None."""
        key = series_key(symbol, refreshed_at)

        if self.redis:
            try:
                value = await self.redis.get(key)
                return json.loads(value) if value else None
            except Exception as e:
                logger.debug(f"Redis get failed for {key}: {e}")

        value = self._memory_get(symbol.upper(), key)
        return json.loads(value) if value else None

    async def set(
        self,
        symbol: str,
        refreshed_at: Optional[datetime],
        payload: Dict[str, Any],
        ttl: int = None,
    ) -> bool:
        """Store a JSON-serializable payload."""
        key = series_key(symbol, refreshed_at)
        value = json.dumps(payload)
        ttl = ttl or self.ttl

        if self.redis:
            try:
                await self.redis.set(key, value, ex=ttl)
                return True
            except Exception as e:
                logger.debug(f"Redis set failed for {key}: {e}")

        self._memory_set(symbol.upper(), key, value, ttl)
        return True


# Singleton instance
_series_cache: Optional[SeriesCache] = None


def get_series_cache() -> SeriesCache:
    """Get the series cache singleton."""
    global _series_cache
    if _series_cache is None:
        _series_cache = SeriesCache()
    return _series_cache
