"""
SQLAlchemy models for StockDash database.

Uses SQLite for local persistence of:
- Tracked companies (one row per symbol)
- Daily OHLCV bars for each company
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    BigInteger,
    Date,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Company(Base):
    """
    A tracked symbol.
    last_refreshed_at is NULL until the first successful upstream fetch.
    """
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), nullable=False, unique=True, index=True)
    display_name = Column(String(100), nullable=False)
    last_refreshed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    bars = relationship(
        "DailyBarRow",
        back_populates="company",
        order_by="DailyBarRow.date",
        cascade="all, delete-orphan",
    )


class DailyBarRow(Base):
    """
    One trading day for one company.
    Replaced wholesale whenever the company is refreshed.
    """
    __tablename__ = "daily_bars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), ForeignKey("companies.symbol"), nullable=False)
    date = Column(Date, nullable=False)

    open = Column(Float, nullable=True)
    high = Column(Float, nullable=True)
    low = Column(Float, nullable=True)
    close = Column(Float, nullable=False)
    volume = Column(BigInteger, nullable=True)

    company = relationship("Company", back_populates="bars")

    __table_args__ = (
        UniqueConstraint("symbol", "date", name="uq_daily_bars_symbol_date"),
        Index("ix_daily_bars_symbol_date", "symbol", "date"),
    )
