"""Paginated funding history fetch over fixed-width time chunks.

Hyperliquid's fundingHistory returns at most 500 records per request, so a
wide range is split into consecutive CHUNK_MS windows walked FORWARD from
start_time. Chunks are requested sequentially; each chunk's bounds depend
only on the partition, never on the previous response.

Upstream treats both window bounds as inclusive, so a sample that lands
exactly on a chunk boundary can come back twice. All samples are merged,
sorted by time, then deduplicated keeping the first occurrence.
"""

import time

from funding_viewer.logging import get_logger, log_context
from funding_viewer.models import FundingSample, FundingSeries
from funding_viewer.upstream.client import UpstreamClient

logger = get_logger(__name__)

MS_PER_DAY = 86_400_000
CHUNK_MS = 20 * MS_PER_DAY


def chunk_ranges(start_time: int, end_time: int, chunk_ms: int) -> list[tuple[int, int]]:
    """Partition [start_time, end_time) into consecutive windows of chunk_ms.

    The last window is clipped to end_time. Returns [] for an empty range.
    """
    ranges: list[tuple[int, int]] = []
    current_start = start_time
    while current_start < end_time:
        current_end = min(current_start + chunk_ms, end_time)
        ranges.append((current_start, current_end))
        current_start = current_end
    return ranges


def merge_samples(samples: list[FundingSample]) -> FundingSeries:
    """Sort samples ascending by time and drop repeated timestamps.

    sorted() is stable, so among equal timestamps the sample collected
    first (earliest chunk) is the one kept.
    """
    series: FundingSeries = []
    seen: set[int] = set()
    for sample in sorted(samples, key=lambda s: s.time):
        if sample.time in seen:
            continue
        seen.add(sample.time)
        series.append(sample)
    return series


class HistoryFetcher:
    """Fetches a coin's complete funding history over an arbitrary range.

    Usage:
        fetcher = HistoryFetcher(client)
        series = await fetcher.fetch_full_history("BTC", start_ms, end_ms)
    """

    def __init__(self, client: UpstreamClient, chunk_ms: int = CHUNK_MS) -> None:
        if chunk_ms <= 0:
            raise ValueError(f"chunk_ms must be positive, got {chunk_ms}")
        self._client = client
        self._chunk_ms = chunk_ms

    @property
    def chunk_ms(self) -> int:
        return self._chunk_ms

    async def fetch_full_history(
        self, coin: str, start_time: int, end_time: int
    ) -> FundingSeries:
        """Fetch every funding sample for coin in [start_time, end_time).

        Issues no request when end_time <= start_time. Any chunk failure
        propagates as UpstreamError and no partial series is returned.

        Args:
            coin: Hyperliquid coin name (e.g. "BTC").
            start_time: Range start, Unix milliseconds.
            end_time: Range end, Unix milliseconds.

        Returns:
            Samples sorted strictly ascending by time.
        """
        ranges = chunk_ranges(start_time, end_time, self._chunk_ms)
        if not ranges:
            return []

        started = time.monotonic()
        collected: list[FundingSample] = []

        with log_context(coin=coin):
            for chunk_start, chunk_end in ranges:
                batch = await self._client.fetch_funding_chunk(coin, chunk_start, chunk_end)
                collected.extend(batch)
                logger.debug(
                    "history_chunk_fetched",
                    chunk_start=chunk_start,
                    chunk_end=chunk_end,
                    records=len(batch),
                )

            series = merge_samples(collected)

            logger.info(
                "history_fetch_complete",
                chunks=len(ranges),
                records=len(series),
                duplicates_dropped=len(collected) - len(series),
                duration_seconds=round(time.monotonic() - started, 2),
            )
        return series
