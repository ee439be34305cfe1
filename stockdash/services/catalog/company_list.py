"""
Company Registry

Fixed list of tracked US equities with display names.
Built once at startup and injected where names are resolved.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass(frozen=True)
class CompanyEntry:
    """A known company."""

    display_name: str
    symbol: str


@dataclass(frozen=True)
class CompanyRegistry:
    """Immutable symbol -> display name mapping, in listing order."""

    entries: tuple[CompanyEntry, ...] = ()
    _by_symbol: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "_by_symbol", {e.symbol.upper(): e for e in self.entries}
        )

    def __iter__(self) -> Iterator[CompanyEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, symbol: str) -> bool:
        return symbol.upper() in self._by_symbol

    def get(self, symbol: str) -> Optional[CompanyEntry]:
        return self._by_symbol.get(symbol.upper())

    def display_name_for(self, symbol: str) -> str:
        """Display name for a symbol, falling back to the symbol itself."""
        entry = self.get(symbol)
        return entry.display_name if entry else symbol.upper()

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> "CompanyRegistry":
        """Build from (display_name, symbol) pairs."""
        return cls(tuple(CompanyEntry(name, symbol.upper()) for name, symbol in pairs))


TRACKED_COMPANIES = [
    ("Microsoft", "MSFT"),
    ("Amazon", "AMZN"),
    ("Google", "GOOGL"),
    ("Facebook / Meta", "META"),
    ("Netflix", "NFLX"),
    ("Nvidia", "NVDA"),
    ("Intel", "INTC"),
    ("Adobe", "ADBE"),
    ("PayPal", "PYPL"),
    ("Salesforce", "CRM"),
    ("Uber", "UBER"),
    ("Lyft", "LYFT"),
    ("Shopify", "SHOP"),
    ("Square / Block", "SQ"),
    ("Spotify", "SPOT"),
    ("Twitter / X", "TWTR"),
    ("Zoom Video", "ZM"),
    ("Pinterest", "PINS"),
    ("Oracle", "ORCL"),
    ("IBM", "IBM"),
    ("Cisco", "CSCO"),
    ("Qualcomm", "QCOM"),
    ("AMD", "AMD"),
    ("American Express", "AXP"),
    ("Visa", "V"),
    ("Mastercard", "MA"),
    ("Bank of America", "BAC"),
]


def default_registry() -> CompanyRegistry:
    """Registry of the companies shown on the dashboard."""
    return CompanyRegistry.from_pairs(TRACKED_COMPANIES)
