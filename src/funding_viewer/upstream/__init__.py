"""Upstream client layer -- Hyperliquid info endpoint via ccxt."""

from funding_viewer.upstream.client import UpstreamClient
from funding_viewer.upstream.hyperliquid_client import HyperliquidClient

__all__ = ["HyperliquidClient", "UpstreamClient"]
