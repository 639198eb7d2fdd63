"""Abstract upstream client interface.

Defines the contract for the funding data provider. The history, batch and
ranking layers depend only on this interface, keeping Hyperliquid and ccxt
details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod

from funding_viewer.models import AssetSummary, FundingSample


class UpstreamClient(ABC):
    """Abstract base class for funding data provider clients."""

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def fetch_asset_metadata(self) -> list[AssetSummary]:
        """Fetch the asset universe paired with current asset contexts.

        Raises:
            UpstreamError: On network failure or a malformed payload.
        """
        ...

    @abstractmethod
    async def fetch_funding_chunk(
        self, coin: str, start_time: int, end_time: int
    ) -> list[FundingSample]:
        """Fetch funding samples for one bounded time range.

        The caller guarantees end_time - start_time stays within the
        provider's per-request limit. Pagination is NOT handled here.

        Raises:
            UpstreamError: On network failure or a non-2xx response.
        """
        ...
