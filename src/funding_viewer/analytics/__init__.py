"""Analytics layer -- series derivations and top performer ranking."""

from funding_viewer.analytics.ranking import AssetRanker, select_candidates
from funding_viewer.analytics.series import (
    annualize,
    annualized_points,
    moving_average,
    summary_stats,
)

__all__ = [
    "AssetRanker",
    "annualize",
    "annualized_points",
    "moving_average",
    "select_candidates",
    "summary_stats",
]
