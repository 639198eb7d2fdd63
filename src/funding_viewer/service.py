"""Transport-agnostic boundary surface over the funding data core.

FundingService wires the upstream client, paginated fetcher, batch
orchestrator and ranker from settings. An HTTP or CLI layer calls these
methods and translates ViewerError subclasses into its own responses.
"""

from collections.abc import Iterable
from decimal import Decimal

from funding_viewer.analytics.ranking import AssetRanker
from funding_viewer.analytics.series import summary_stats
from funding_viewer.config import AppSettings
from funding_viewer.history.batch import BatchOrchestrator, BatchPolicy
from funding_viewer.history.fetcher import MS_PER_DAY, HistoryFetcher
from funding_viewer.logging import get_logger
from funding_viewer.models import AssetSummary, FundingSeries, RankedAsset, SummaryStats
from funding_viewer.upstream.client import UpstreamClient

logger = get_logger(__name__)


class FundingService:
    """Entry point for asset listing, history retrieval and ranking.

    Usage:
        async with FundingService(HyperliquidClient(settings.upstream), settings) as svc:
            assets = await svc.get_assets()
            top = await svc.get_top_performers(assets)
    """

    def __init__(self, client: UpstreamClient, settings: AppSettings) -> None:
        self._client = client
        self._settings = settings
        self._fetcher = HistoryFetcher(
            client, chunk_ms=settings.history.chunk_days * MS_PER_DAY
        )
        self._batch = BatchOrchestrator(self._fetcher)
        self._ranker = AssetRanker(
            self._batch, candidate_limit=settings.ranking.candidate_limit
        )

    async def __aenter__(self) -> "FundingService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the upstream client's resources."""
        await self._client.close()

    async def get_assets(self) -> list[AssetSummary]:
        """Return every perpetual asset with current funding, mark price and OI."""
        return await self._client.fetch_asset_metadata()

    @staticmethod
    def search_assets(assets: list[AssetSummary], term: str) -> list[AssetSummary]:
        """Filter assets by case-insensitive substring match on the name."""
        needle = term.strip().lower()
        if not needle:
            return list(assets)
        return [a for a in assets if needle in a.name.lower()]

    async def get_funding_history(self, coin: str, days: int | None = None) -> FundingSeries:
        """Return the complete funding history of one coin over the last `days` days."""
        if days is None:
            days = self._settings.history.default_days
        return await self._batch.fetch_history(coin, days)

    async def get_funding_history_batch(
        self, coins: Iterable[str], days: int | None = None
    ) -> dict[str, FundingSeries]:
        """Return histories for several coins; any coin's failure fails the call."""
        if days is None:
            days = self._settings.history.default_days
        return await self._batch.fetch_batch(coins, days, policy=BatchPolicy.FAIL_FAST)

    async def get_top_performers(
        self,
        assets: list[AssetSummary],
        history_days: int | None = None,
        min_oi_usd: Decimal | int | None = None,
        top_n: int | None = None,
    ) -> list[RankedAsset]:
        """Rank liquid assets by average annualized funding.

        Unset arguments fall back to RankingSettings (30 days, $1M, top 5).
        """
        ranking = self._settings.ranking
        return await self._ranker.rank_top_performers(
            assets,
            min_oi_usd=Decimal(str(min_oi_usd)) if min_oi_usd is not None else ranking.min_oi_usd,
            top_n=top_n if top_n is not None else ranking.top_n,
            history_days=history_days if history_days is not None else ranking.history_days,
        )

    @staticmethod
    def get_series_stats(
        series_by_coin: dict[str, FundingSeries],
    ) -> dict[str, SummaryStats]:
        """Summarize each non-empty series; coins without data are skipped."""
        return {
            coin: summary_stats(series)
            for coin, series in series_by_coin.items()
            if series
        }
