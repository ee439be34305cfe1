"""
Catalog Seeder

Ensures every registry company has a record in the store.
Existing records are never overwritten.
"""

import logging

from stockdash.schemas.series import SymbolRecord
from stockdash.services.catalog.company_list import CompanyRegistry
from stockdash.services.store.interface import SeriesStoreInterface

logger = logging.getLogger(__name__)


async def seed_companies(store: SeriesStoreInterface, registry: CompanyRegistry) -> int:
    """
    Insert an empty, never-refreshed record for each missing company.

    Failures are logged and do not propagate; startup continues.

    Returns:
        Number of records inserted
    """
    inserted = 0
    try:
        for entry in registry:
            record = SymbolRecord(
                symbol=entry.symbol,
                display_name=entry.display_name,
                bars=[],
                last_refreshed_at=None,
            )
            if await store.insert_if_absent(record):
                inserted += 1
        logger.info(f"Companies seeded ({inserted} new, {len(registry)} tracked)")
    except Exception as e:
        logger.warning(f"Seed error: {e}")
    return inserted
