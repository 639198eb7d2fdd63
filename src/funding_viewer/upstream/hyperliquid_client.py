"""Hyperliquid info endpoint client implementation via ccxt async.

Wraps ccxt.async_support.hyperliquid and calls its implicit
public_post_info endpoint directly, decoding the raw JSON into Decimal
records. ccxt errors are translated to UpstreamError at this boundary.

Payload contracts:
- metaAndAssetCtxs -> [{"universe": [{"name": ...}, ...]}, [{"funding", "markPx", "openInterest"}, ...]]
  universe[i] is paired with contexts[i] by position.
- fundingHistory -> [{"coin", "time", "fundingRate", "premium"}, ...]
"""

import json
from decimal import Decimal, InvalidOperation

import ccxt.async_support as ccxt_async

from funding_viewer.config import UpstreamSettings
from funding_viewer.exceptions import UpstreamError
from funding_viewer.logging import get_logger
from funding_viewer.models import AssetSummary, FundingSample
from funding_viewer.upstream.client import UpstreamClient

logger = get_logger(__name__)


class InfoExchange(ccxt_async.hyperliquid):
    """ccxt hyperliquid that leaves 2xx payload interpretation to the caller.

    Stock ccxt raises ExchangeError for any 2xx JSON object body (e.g.
    {"status": "err"} for an unknown coin). fundingHistory treats those as
    "no data", so 2xx bodies pass through untouched. Non-2xx statuses still
    raise via handle_http_status_code.
    """

    def handle_errors(
        self, code, reason, url, method, headers, body, response, requestHeaders, requestBody
    ):
        if 200 <= code < 300:
            return None
        return super().handle_errors(
            code, reason, url, method, headers, body, response, requestHeaders, requestBody
        )


class HyperliquidClient(UpstreamClient):
    """Concrete Hyperliquid client using ccxt async."""

    def __init__(self, settings: UpstreamSettings) -> None:
        self._settings = settings

        config: dict = {
            "enableRateLimit": settings.enable_rate_limit,
            "timeout": settings.timeout_ms,
            "urls": {
                "api": {
                    "public": settings.base_url,
                },
            },
        }

        self._exchange = InfoExchange(config)

    @property
    def exchange(self) -> InfoExchange:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        await self._exchange.close()
        logger.debug("hyperliquid_connection_closed")

    async def fetch_asset_metadata(self) -> list[AssetSummary]:
        """Fetch all perpetual assets with their current funding, mark price and OI.

        Missing context fields default to "0". Unlike a plain zip, a length
        mismatch between the universe and the contexts is an error rather
        than a silent truncation.
        """
        data = await self._post_info({"type": "metaAndAssetCtxs"})

        if not isinstance(data, list) or len(data) < 2:
            raise UpstreamError("metaAndAssetCtxs: expected [meta, contexts] payload")

        meta, contexts = data[0], data[1]
        universe = meta.get("universe") if isinstance(meta, dict) else None
        if not isinstance(universe, list) or not isinstance(contexts, list):
            raise UpstreamError("metaAndAssetCtxs: missing universe or contexts")

        if len(universe) != len(contexts):
            raise UpstreamError(
                f"metaAndAssetCtxs: universe has {len(universe)} entries "
                f"but contexts has {len(contexts)}"
            )

        assets: list[AssetSummary] = []
        try:
            for asset, ctx in zip(universe, contexts):
                ctx = ctx or {}
                assets.append(
                    AssetSummary(
                        name=asset["name"],
                        current_funding=_to_decimal(ctx.get("funding")),
                        mark_price=_to_decimal(ctx.get("markPx")),
                        open_interest=_to_decimal(ctx.get("openInterest")),
                    )
                )
        except (KeyError, TypeError, AttributeError, InvalidOperation) as e:
            raise UpstreamError(f"metaAndAssetCtxs: malformed entry: {e}") from e

        logger.debug("asset_metadata_fetched", count=len(assets))
        return assets

    async def fetch_funding_chunk(
        self, coin: str, start_time: int, end_time: int
    ) -> list[FundingSample]:
        """Fetch one bounded window of funding history.

        A payload that is not a list (e.g. an error object for an unknown
        coin) decodes to an empty list.
        """
        data = await self._post_info(
            {
                "type": "fundingHistory",
                "coin": coin,
                "startTime": start_time,
                "endTime": end_time,
            }
        )

        if not isinstance(data, list):
            logger.debug("funding_chunk_not_a_list", coin=coin, start_time=start_time)
            return []

        try:
            return [
                FundingSample(
                    time=int(item["time"]),
                    funding_rate=Decimal(str(item["fundingRate"])),
                    premium=Decimal(str(item["premium"])),
                )
                for item in data
            ]
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise UpstreamError(f"fundingHistory {coin}: malformed entry: {e}") from e

    async def _post_info(self, body: dict) -> object:
        """POST a request body to /info and return the decoded JSON.

        ccxt hands back the raw body whenever it did not decode it to a
        non-null value (a JSON null arrives as the string "null"), so text
        bodies are parsed here. Only bodies that fail to parse are non-JSON.
        """
        try:
            data = await self._exchange.public_post_info(body)
        except ccxt_async.BaseError as e:
            logger.warning(
                "upstream_request_failed",
                request_type=body.get("type"),
                error=str(e),
            )
            raise UpstreamError(f"{body.get('type')} request failed: {e}") from e

        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except ValueError as e:
                raise UpstreamError(f"{body.get('type')}: non-JSON response") from e
        return data


def _to_decimal(value: object) -> Decimal:
    """Convert an upstream numeric string to Decimal, treating missing as "0"."""
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))
