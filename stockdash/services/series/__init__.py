"""
Series Service (freshness-aware cache controller)

CONTRACT:
    Input:  symbol
    Output: SeriesResult

RESPONSIBILITIES:
    - Decide by age whether stored history must be refetched
    - Replace bars and refresh timestamp in a single store commit
    - Serve stale data when the upstream provider fails
    - Compute trailing-window stats and indicators
"""

from typing import Optional

from stockdash.core.config import settings
from stockdash.services.cache.redis_client import get_series_cache
from stockdash.services.catalog.company_list import CompanyRegistry, default_registry
from stockdash.services.data_ingestion import get_market_data_fetcher
from stockdash.services.indicators import get_indicator_service
from stockdash.services.series.interface import SeriesServiceInterface
from stockdash.services.series.locks import SymbolLocks
from stockdash.services.series.service import SeriesService, window_stats
from stockdash.services.store import get_series_store

# Singleton instances
_registry_instance: Optional[CompanyRegistry] = None
_service_instance: Optional[SeriesService] = None


def get_company_registry() -> CompanyRegistry:
    """Get the registry fixed at process start."""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = default_registry()
    return _registry_instance


def get_series_service() -> SeriesService:
    """Get or create series service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = SeriesService(
            store=get_series_store(),
            fetcher=get_market_data_fetcher(),
            registry=get_company_registry(),
            indicator_service=get_indicator_service(),
            cache=get_series_cache() if settings.enable_series_cache else None,
        )
    return _service_instance


__all__ = [
    "SeriesServiceInterface",
    "SeriesService",
    "SymbolLocks",
    "window_stats",
    "get_company_registry",
    "get_series_service",
]
