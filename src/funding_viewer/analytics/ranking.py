"""Top performer ranking by average annualized funding.

Pipeline per request:
  oi_usd = open_interest * mark_price
  keep oi_usd >= min_oi_usd, sort by oi_usd desc, cap at candidate_limit
  best-effort batch fetch of candidate histories
  avg_annualized_rate = annualize(mean(funding_rate)) per non-empty series
  sort by avg_annualized_rate desc, take top_n

Both sorts are stable, so ties keep the input order of the assets.
"""

from decimal import Decimal

from funding_viewer.analytics.series import annualize
from funding_viewer.exceptions import ValidationError
from funding_viewer.history.batch import BatchOrchestrator, BatchPolicy
from funding_viewer.logging import get_logger
from funding_viewer.models import AssetSummary, RankedAsset

logger = get_logger(__name__)

DEFAULT_CANDIDATE_LIMIT = 30


def select_candidates(
    assets: list[AssetSummary],
    min_oi_usd: Decimal,
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> list[AssetSummary]:
    """Select the most liquid assets whose USD open interest meets the threshold.

    Args:
        assets: Current asset snapshots.
        min_oi_usd: Minimum open interest in USD (inclusive).
        limit: Maximum number of candidates returned.

    Returns:
        Assets sorted by oi_usd descending, at most `limit` of them.
    """
    eligible = [a for a in assets if a.oi_usd >= min_oi_usd]
    eligible.sort(key=lambda a: a.oi_usd, reverse=True)
    return eligible[:limit]


class AssetRanker:
    """Ranks liquid assets by their average annualized funding rate.

    Args:
        batch: Orchestrator used to fetch candidate histories (best-effort).
        candidate_limit: Cap on how many coins are fetched per ranking.
    """

    def __init__(
        self,
        batch: BatchOrchestrator,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ) -> None:
        self._batch = batch
        self._candidate_limit = candidate_limit

    async def rank_top_performers(
        self,
        assets: list[AssetSummary],
        min_oi_usd: Decimal,
        top_n: int,
        history_days: int,
    ) -> list[RankedAsset]:
        """Return the top_n candidates by average annualized funding.

        Candidates whose history could not be fetched or came back empty
        are dropped rather than ranked at zero.

        Raises:
            ValidationError: If min_oi_usd < 0, top_n < 1 or history_days < 1.
        """
        if min_oi_usd < 0:
            raise ValidationError(f"min_oi_usd must be >= 0, got {min_oi_usd}")
        if top_n < 1:
            raise ValidationError(f"top_n must be >= 1, got {top_n}")
        if history_days < 1:
            raise ValidationError(f"history_days must be >= 1, got {history_days}")

        candidates = select_candidates(assets, min_oi_usd, self._candidate_limit)
        if not candidates:
            logger.info("no_ranking_candidates", min_oi_usd=str(min_oi_usd))
            return []

        histories = await self._batch.fetch_batch(
            [a.name for a in candidates],
            history_days,
            policy=BatchPolicy.BEST_EFFORT,
        )

        rankings: list[RankedAsset] = []
        for asset in candidates:
            series = histories.get(asset.name)
            if not series:
                continue
            avg_rate = sum((s.funding_rate for s in series), Decimal("0")) / Decimal(
                len(series)
            )
            rankings.append(
                RankedAsset(
                    name=asset.name,
                    avg_annualized_rate=annualize(avg_rate),
                    open_interest_usd=asset.oi_usd,
                )
            )

        rankings.sort(key=lambda r: r.avg_annualized_rate, reverse=True)
        top = rankings[:top_n]

        logger.info(
            "top_performers_ranked",
            candidates=len(candidates),
            ranked=len(rankings),
            top=[r.name for r in top],
        )
        return top
