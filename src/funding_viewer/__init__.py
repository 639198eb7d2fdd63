"""Hyperliquid funding rate history viewer: fetch, paginate, aggregate and rank."""

__version__ = "0.1.0"
