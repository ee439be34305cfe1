"""
SQLAlchemy series store.

Companies and their daily bars live in SQLite (aiosqlite).
A refresh deletes and re-inserts the symbol's bars and updates the
company row in the same transaction.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from stockdash.db.database import AsyncSessionLocal, get_db_context
from stockdash.db.models import Company, DailyBarRow
from stockdash.schemas.series import CompanySummary, DailyBar, SymbolRecord
from stockdash.services.base import StoreUnavailable
from stockdash.services.store.interface import SeriesStoreInterface

logger = logging.getLogger(__name__)


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo, so timestamps are stored as naive UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_record(company: Company) -> SymbolRecord:
    return SymbolRecord(
        symbol=company.symbol,
        display_name=company.display_name,
        bars=[
            DailyBar(
                date=row.date,
                open=row.open,
                high=row.high,
                low=row.low,
                close=row.close,
                volume=row.volume,
            )
            for row in company.bars
        ],
        last_refreshed_at=_to_utc(company.last_refreshed_at),
    )


def _to_rows(record: SymbolRecord) -> list[DailyBarRow]:
    return [
        DailyBarRow(
            symbol=record.symbol,
            date=bar.date,
            open=bar.open,
            high=bar.high,
            low=bar.low,
            close=bar.close,
            volume=bar.volume,
        )
        for bar in record.bars
    ]


class SqlSeriesStore(SeriesStoreInterface):
    """Series store backed by the SQLAlchemy async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = None):
        self._session_factory = session_factory or AsyncSessionLocal

    async def find_by_symbol(self, symbol: str) -> Optional[SymbolRecord]:
        try:
            async with get_db_context(self._session_factory) as session:
                result = await session.execute(
                    select(Company)
                    .options(selectinload(Company.bars))
                    .where(Company.symbol == symbol.upper())
                )
                company = result.scalar_one_or_none()
                return _to_record(company) if company else None
        except SQLAlchemyError as e:
            logger.error(f"Store read failed for {symbol}: {e}")
            raise StoreUnavailable(self.name, f"Failed to load {symbol}", {"error": str(e)})

    async def upsert(self, record: SymbolRecord) -> None:
        try:
            async with get_db_context(self._session_factory) as session:
                result = await session.execute(
                    select(Company).where(Company.symbol == record.symbol)
                )
                company = result.scalar_one_or_none()
                if company is None:
                    company = Company(symbol=record.symbol)
                    session.add(company)

                company.display_name = record.display_name
                company.last_refreshed_at = _to_utc(record.last_refreshed_at)

                await session.execute(
                    delete(DailyBarRow).where(DailyBarRow.symbol == record.symbol)
                )
                session.add_all(_to_rows(record))
            logger.info(f"Stored {len(record.bars)} bars for {record.symbol}")
        except SQLAlchemyError as e:
            logger.error(f"Store write failed for {record.symbol}: {e}")
            raise StoreUnavailable(
                self.name, f"Failed to save {record.symbol}", {"error": str(e)}
            )

    async def insert_if_absent(self, record: SymbolRecord) -> bool:
        try:
            async with get_db_context(self._session_factory) as session:
                result = await session.execute(
                    select(Company.id).where(Company.symbol == record.symbol)
                )
                if result.scalar_one_or_none() is not None:
                    return False
                session.add(
                    Company(
                        symbol=record.symbol,
                        display_name=record.display_name,
                        last_refreshed_at=_to_utc(record.last_refreshed_at),
                    )
                )
                session.add_all(_to_rows(record))
            return True
        except IntegrityError:
            # Inserted concurrently by another worker
            return False
        except SQLAlchemyError as e:
            logger.error(f"Store insert failed for {record.symbol}: {e}")
            raise StoreUnavailable(
                self.name, f"Failed to insert {record.symbol}", {"error": str(e)}
            )

    async def list_all(self) -> list[CompanySummary]:
        try:
            async with get_db_context(self._session_factory) as session:
                result = await session.execute(
                    select(Company.display_name, Company.symbol).order_by(Company.id)
                )
                return [
                    CompanySummary(display_name=display_name, symbol=symbol)
                    for display_name, symbol in result.all()
                ]
        except SQLAlchemyError as e:
            logger.error(f"Store listing failed: {e}")
            raise StoreUnavailable(self.name, "Failed to list companies", {"error": str(e)})
