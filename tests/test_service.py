"""Tests for FundingService wiring over a mocked upstream client."""

from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from funding_viewer.config import AppSettings
from funding_viewer.exceptions import UpstreamError, ValidationError
from funding_viewer.history.fetcher import MS_PER_DAY
from funding_viewer.models import AssetSummary, FundingSample
from funding_viewer.service import FundingService
from funding_viewer.upstream.client import UpstreamClient

NOW_MS = 1_700_000_000_000
HOUR_MS = 3_600_000

ASSETS = [
    AssetSummary("BTC", Decimal("0.0000125"), Decimal("50000"), Decimal("100")),
    AssetSummary("ETH", Decimal("0.00001"), Decimal("3000"), Decimal("1000")),
    AssetSummary("DOGE", Decimal("0.00005"), Decimal("0.1"), Decimal("1000000")),
]

RATES = {"BTC": Decimal("0.00001"), "ETH": Decimal("0.00002"), "BAD": None}


async def _chunk(coin: str, start_time: int, end_time: int) -> list[FundingSample]:
    """Hourly samples inside [start_time, end_time] at a fixed per-coin rate."""
    rate = RATES[coin]
    if rate is None:
        raise UpstreamError(f"{coin}: 500")
    first = start_time + (-start_time % HOUR_MS)
    return [
        FundingSample(time=t, funding_rate=rate, premium=Decimal("0"))
        for t in range(first, end_time + 1, HOUR_MS)
    ]


@pytest.fixture
def upstream() -> AsyncMock:
    client = AsyncMock(spec=UpstreamClient)
    client.fetch_asset_metadata = AsyncMock(return_value=ASSETS)
    client.fetch_funding_chunk = AsyncMock(side_effect=_chunk)
    return client


@pytest.fixture
def service(upstream: AsyncMock, mock_settings: AppSettings) -> FundingService:
    return FundingService(upstream, mock_settings)


@pytest.fixture(autouse=True)
def frozen_clock():
    with patch("funding_viewer.history.batch.time.time", return_value=NOW_MS / 1000):
        yield


class TestGetAssets:
    """Tests for asset listing and search."""

    @pytest.mark.asyncio
    async def test_get_assets(self, service: FundingService) -> None:
        assert await service.get_assets() == ASSETS

    def test_search_is_case_insensitive(self) -> None:
        assert [a.name for a in FundingService.search_assets(ASSETS, "do")] == ["DOGE"]
        assert [a.name for a in FundingService.search_assets(ASSETS, "Th")] == ["ETH"]

    def test_blank_search_returns_all(self) -> None:
        assert FundingService.search_assets(ASSETS, "  ") == ASSETS


class TestFundingHistory:
    """Tests for single and batch history retrieval."""

    @pytest.mark.asyncio
    async def test_history_is_paginated(
        self, service: FundingService, upstream: AsyncMock
    ) -> None:
        series = await service.get_funding_history("BTC", days=45)

        # 45 days at 20-day chunks -> 3 requests
        assert upstream.fetch_funding_chunk.await_count == 3
        times = [s.time for s in series]
        assert times == sorted(set(times))
        assert times[0] >= NOW_MS - 45 * MS_PER_DAY
        assert times[-1] <= NOW_MS

    @pytest.mark.asyncio
    async def test_history_defaults_to_configured_days(
        self, service: FundingService, upstream: AsyncMock
    ) -> None:
        await service.get_funding_history("BTC")
        first_call = upstream.fetch_funding_chunk.await_args_list[0]
        assert first_call.args[1] == NOW_MS - 30 * MS_PER_DAY

    @pytest.mark.asyncio
    async def test_batch_is_fail_fast(self, service: FundingService) -> None:
        with pytest.raises(UpstreamError):
            await service.get_funding_history_batch(["BTC", "BAD"], days=1)

    @pytest.mark.asyncio
    async def test_batch_returns_every_coin(self, service: FundingService) -> None:
        result = await service.get_funding_history_batch(["BTC", "ETH"], days=1)
        assert set(result) == {"BTC", "ETH"}
        assert all(result.values())

    @pytest.mark.asyncio
    async def test_invalid_days(self, service: FundingService) -> None:
        with pytest.raises(ValidationError):
            await service.get_funding_history("BTC", days=0)


class TestTopPerformers:
    """Tests for ranking through the service defaults."""

    @pytest.mark.asyncio
    async def test_defaults_rank_liquid_assets(self, service: FundingService) -> None:
        # DOGE OI is $100k, below the $1M default threshold
        top = await service.get_top_performers(ASSETS)

        assert [r.name for r in top] == ["ETH", "BTC"]
        assert top[0].avg_annualized_rate == Decimal("17.52")
        assert top[1].open_interest_usd == Decimal("5000000")

    @pytest.mark.asyncio
    async def test_overrides(self, service: FundingService) -> None:
        top = await service.get_top_performers(
            ASSETS, history_days=2, min_oi_usd=4_000_000, top_n=1
        )
        assert [r.name for r in top] == ["BTC"]

    @pytest.mark.asyncio
    async def test_failed_coin_does_not_fail_ranking(
        self, service: FundingService
    ) -> None:
        assets = ASSETS + [AssetSummary("BAD", Decimal("0"), Decimal("1"), Decimal("9000000"))]
        top = await service.get_top_performers(assets)
        assert [r.name for r in top] == ["ETH", "BTC"]


class TestSeriesStatsAndLifecycle:
    """Tests for stat cards and resource cleanup."""

    def test_stats_skip_empty_series(self) -> None:
        series = [FundingSample(0, Decimal("0.0001"), Decimal("0"))]
        stats = FundingService.get_series_stats({"BTC": series, "ETH": []})
        assert list(stats) == ["BTC"]
        assert stats["BTC"].current == Decimal("0.01")

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(
        self, upstream: AsyncMock, mock_settings: AppSettings
    ) -> None:
        async with FundingService(upstream, mock_settings):
            pass
        upstream.close.assert_awaited_once()
