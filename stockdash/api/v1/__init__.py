"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from stockdash.api.v1.endpoints import stocks

router = APIRouter()

# Include all endpoint routers
router.include_router(stocks.router, tags=["Stocks"])
