"""Shared data models for the funding rate viewer.

CRITICAL: All rates, prices and open interest use Decimal. Never use float
for market values; upstream strings are converted with Decimal(str(x)).
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AssetSummary:
    """Current snapshot of a perpetual asset from metaAndAssetCtxs."""

    name: str
    current_funding: Decimal
    mark_price: Decimal
    open_interest: Decimal  # in contracts, not USD

    @property
    def oi_usd(self) -> Decimal:
        """Open interest converted to USD via mark price."""
        return self.open_interest * self.mark_price


@dataclass(frozen=True)
class FundingSample:
    """A single hourly funding settlement for one coin."""

    time: int  # Unix milliseconds
    funding_rate: Decimal
    premium: Decimal


# Sorted strictly ascending by time, unique time per coin.
FundingSeries = list[FundingSample]


@dataclass(frozen=True)
class RankedAsset:
    """Top performer entry, recomputed on every ranking request."""

    name: str
    avg_annualized_rate: Decimal  # percent APR
    open_interest_usd: Decimal


@dataclass(frozen=True)
class SeriesPoint:
    """A (time, value) pair for display-ready series."""

    time: int
    value: Decimal


@dataclass(frozen=True)
class SummaryStats:
    """Per-coin summary statistics, all in percent per funding period.

    apr is the average scaled to a year of hourly settlements.
    """

    avg: Decimal
    min: Decimal
    max: Decimal
    current: Decimal
    apr: Decimal
