"""
Cache module for StockDash.

Provides Redis caching for composed series responses.
"""

from stockdash.services.cache.redis_client import (
    SeriesCache,
    get_series_cache,
    init_redis,
    close_redis,
)

__all__ = [
    "SeriesCache",
    "get_series_cache",
    "init_redis",
    "close_redis",
]
