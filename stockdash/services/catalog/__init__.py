"""
Company Catalog

Static registry of tracked companies and the startup seeder that
mirrors it into the series store.
"""

from stockdash.services.catalog.company_list import (
    CompanyEntry,
    CompanyRegistry,
    TRACKED_COMPANIES,
    default_registry,
)
from stockdash.services.catalog.seeder import seed_companies

__all__ = [
    "CompanyEntry",
    "CompanyRegistry",
    "TRACKED_COMPANIES",
    "default_registry",
    "seed_companies",
]
