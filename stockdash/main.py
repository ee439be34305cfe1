"""
StockDash Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockdash.core.config import settings
from stockdash.api.v1 import router as api_v1_router
from stockdash.services.series import SeriesService, get_series_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    print(f"Starting {settings.app_name} v{settings.app_version}")
    print(f"Environment: {settings.environment}")

    # Initialize SQLite database
    from stockdash.db.database import init_db, close_db
    await init_db()
    print("Database initialized")

    # Initialize Redis cache
    from stockdash.services.cache.redis_client import init_redis, close_redis
    redis_client = await init_redis() if settings.enable_series_cache else None
    if redis_client:
        print("Redis cache connected")
    else:
        print("Redis unavailable - using in-memory cache")

    # Seed tracked companies (failures are logged, not fatal)
    from stockdash.services.catalog import seed_companies
    from stockdash.services.series import get_company_registry
    from stockdash.services.store import get_series_store
    inserted = await seed_companies(get_series_store(), get_company_registry())
    print(f"Companies seeded ({inserted} new)")

    yield

    # Shutdown
    print("Shutting down...")
    await close_redis()
    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    StockDash Historical Data API

    ## Architecture
    - **Series Store**: SQLite cache of daily bars per company
    - **Market Data**: End-of-day history from Yahoo Finance
    - **Freshness Controller**: Refetches history older than 24 hours
    - **Indicator Engine**: SMA, RSI and MACD (pure Python/NumPy)
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Dashboard paths at the root, and the same routes versioned
app.include_router(api_v1_router, include_in_schema=False)
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check(service: SeriesService = Depends(get_series_service)):
    """Health check endpoint; reports whether the series store answers."""
    store_ok = await service.health_check()
    return {
        "status": "healthy" if store_ok else "degraded",
        "store": "connected" if store_ok else "unavailable",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Backend API is up and running!",
        "docs": "/docs",
        "health": "/health",
    }
