"""Concurrent multi-coin history fetch with an explicit failure policy.

Every coin in a batch shares one snapshot window: end = now, start =
end - days. Per-coin fetches run concurrently via asyncio.gather and are
always joined before returning, so no result map exists until every branch
has finished.

Failure policy is chosen per call:
- FAIL_FAST (default): any coin's UpstreamError fails the whole batch.
- BEST_EFFORT: failed coins are logged and left out of the result.
Errors other than UpstreamError are never swallowed.
"""

import asyncio
import time
from collections.abc import Iterable
from enum import Enum

from funding_viewer.exceptions import UpstreamError, ValidationError
from funding_viewer.history.fetcher import MS_PER_DAY, HistoryFetcher
from funding_viewer.logging import get_logger
from funding_viewer.models import FundingSeries

logger = get_logger(__name__)


class BatchPolicy(str, Enum):
    """How a batch treats individual coin failures."""

    FAIL_FAST = "fail_fast"
    BEST_EFFORT = "best_effort"


def history_window(days: int, now_ms: int | None = None) -> tuple[int, int]:
    """Return (start_ms, end_ms) covering the last `days` days up to now."""
    if days < 1:
        raise ValidationError(f"days must be >= 1, got {days}")
    end_time = now_ms if now_ms is not None else int(time.time() * 1000)
    return end_time - days * MS_PER_DAY, end_time


class BatchOrchestrator:
    """Fans paginated history fetches out across a set of coins.

    Args:
        fetcher: Paginated fetcher used for every coin.
    """

    def __init__(self, fetcher: HistoryFetcher) -> None:
        self._fetcher = fetcher

    async def fetch_history(self, coin: str, days: int) -> FundingSeries:
        """Fetch the last `days` days of history for a single coin."""
        if not coin:
            raise ValidationError("coin must be a non-empty string")
        start_time, end_time = history_window(days)
        return await self._fetcher.fetch_full_history(coin, start_time, end_time)

    async def fetch_batch(
        self,
        coins: Iterable[str],
        days: int,
        policy: BatchPolicy = BatchPolicy.FAIL_FAST,
    ) -> dict[str, FundingSeries]:
        """Fetch the last `days` days of history for every coin concurrently.

        Args:
            coins: Coin names; duplicates are collapsed, first-seen order kept.
            days: Lookback in days (>= 1).
            policy: Failure policy for individual coins.

        Returns:
            Dict mapping coin name to its series, in request order.

        Raises:
            ValidationError: If coins is empty or days < 1.
            UpstreamError: Under FAIL_FAST, the first failing coin's error.
        """
        unique_coins = list(dict.fromkeys(coins))
        if not unique_coins:
            raise ValidationError("coins must contain at least one coin")
        if any(not coin for coin in unique_coins):
            raise ValidationError("coin names must be non-empty strings")

        # One snapshot instant for the whole batch
        start_time, end_time = history_window(days)

        logger.info(
            "batch_fetch_started",
            coins=len(unique_coins),
            days=days,
            policy=policy.value,
        )

        tasks = [
            self._fetcher.fetch_full_history(coin, start_time, end_time)
            for coin in unique_coins
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        series_by_coin: dict[str, FundingSeries] = {}
        failed: list[str] = []
        first_error: UpstreamError | None = None

        for coin, result in zip(unique_coins, results):
            if isinstance(result, UpstreamError):
                failed.append(coin)
                if first_error is None:
                    first_error = result
                logger.warning("batch_coin_failed", coin=coin, error=str(result))
            elif isinstance(result, BaseException):
                raise result
            else:
                series_by_coin[coin] = result

        if first_error is not None and policy is BatchPolicy.FAIL_FAST:
            logger.error(
                "batch_fetch_failed",
                failed=failed,
                coins=len(unique_coins),
            )
            raise first_error

        logger.info(
            "batch_fetch_complete",
            fetched=len(series_by_coin),
            failed=len(failed),
        )
        return series_by_coin
