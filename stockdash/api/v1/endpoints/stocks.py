"""
Stock Series API Endpoints

Endpoints for the company listing and per-symbol history with indicators.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from stockdash.schemas.series import CompanySummary, SeriesResult
from stockdash.services.base import NoDataFound, StoreUnavailable, ValidationError
from stockdash.services.series import SeriesServiceInterface, get_series_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/companies", response_model=list[CompanySummary])
async def list_companies(
    service: SeriesServiceInterface = Depends(get_series_service),
):
    """
    List tracked companies.

    Returns display name and symbol for every stored company.
    """
    try:
        return await service.list_companies()
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message)


@router.get("/stocks/{symbol}", response_model=SeriesResult)
async def get_stock(
    symbol: str,
    service: SeriesServiceInterface = Depends(get_series_service),
):
    """
    Get daily history for a symbol.

    Refreshes from Yahoo Finance when the cached copy is older than the
    freshness window. Returns:
    - bars (most recent first)
    - 52-week high, low and average volume
    - SMA 50/200, RSI 14, MACD 12/26/9
    """
    try:
        return await service.get_series(symbol)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NoDataFound:
        raise HTTPException(status_code=404, detail="No data found")
    except StoreUnavailable as e:
        logger.error(f"Store unavailable serving {symbol}: {e}")
        raise HTTPException(status_code=503, detail=e.message)
