"""Command-line entry point for the funding rate viewer.

Fetches the asset universe, logs the top performers by average annualized
funding, then fetches the selected coins' history and logs their summary
statistics.

Component wiring order:
1. AppSettings (configuration)
2. Logging setup
3. HyperliquidClient (upstream)
4. FundingService (fetcher, batch orchestrator, ranker)
"""

import argparse
import asyncio

from funding_viewer.analytics.series import annualized_points, moving_average
from funding_viewer.config import AppSettings
from funding_viewer.exceptions import ViewerError
from funding_viewer.logging import get_logger, setup_logging
from funding_viewer.service import FundingService
from funding_viewer.upstream.hyperliquid_client import HyperliquidClient

DEFAULT_COINS = ["BTC", "ETH"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="funding-viewer",
        description="Hyperliquid funding rate history and top performers",
    )
    parser.add_argument(
        "--coins",
        nargs="+",
        default=DEFAULT_COINS,
        help="Coins to fetch history for (default: BTC ETH)",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Lookback in days (default: HISTORY_DEFAULT_DAYS)",
    )
    parser.add_argument(
        "--smooth",
        action="store_true",
        help="Also log the latest 24h moving average of the annualized rate",
    )
    parser.add_argument(
        "--no-ranking",
        action="store_true",
        help="Skip the top performers ranking",
    )
    return parser.parse_args(argv)


async def run(argv: list[str] | None = None) -> int:
    """Run one fetch-and-report pass. Returns a process exit code."""
    args = _parse_args(argv)

    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("funding_viewer.main")

    days = args.days if args.days is not None else settings.history.default_days

    async with FundingService(HyperliquidClient(settings.upstream), settings) as service:
        try:
            if not args.no_ranking:
                assets = await service.get_assets()
                logger.info("assets_loaded", count=len(assets))

                top = await service.get_top_performers(assets)
                for rank, asset in enumerate(top, 1):
                    logger.info(
                        "top_performer",
                        rank=rank,
                        coin=asset.name,
                        avg_apr_pct=f"{asset.avg_annualized_rate:.2f}",
                        open_interest_usd=f"{asset.open_interest_usd:.0f}",
                    )

            histories = await service.get_funding_history_batch(args.coins, days)
        except ViewerError as e:
            logger.error("funding_viewer_failed", error=str(e))
            return 1

        for coin, stats in service.get_series_stats(histories).items():
            logger.info(
                "funding_stats",
                coin=coin,
                samples=len(histories[coin]),
                current_pct=f"{stats.current:.4f}",
                avg_pct=f"{stats.avg:.4f}",
                max_pct=f"{stats.max:.4f}",
                min_pct=f"{stats.min:.4f}",
                apr_avg_pct=f"{stats.apr:.2f}",
            )

            if args.smooth:
                smoothed = moving_average(annualized_points(histories[coin]), 24)
                logger.info(
                    "funding_24h_average",
                    coin=coin,
                    time=smoothed[-1].time,
                    apr_pct=f"{smoothed[-1].value:.2f}",
                )

        missing = [c for c in histories if not histories[c]]
        if missing:
            logger.warning("no_funding_data", coins=missing)

    return 0


def main() -> None:
    """Synchronous entry point."""
    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
