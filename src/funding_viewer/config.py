"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class UpstreamSettings(BaseSettings):
    """Hyperliquid info endpoint connection settings."""

    model_config = SettingsConfigDict(env_prefix="UPSTREAM_")

    base_url: str = "https://api.hyperliquid.xyz"
    timeout_ms: int = 10_000
    enable_rate_limit: bool = True


class HistorySettings(BaseSettings):
    """Funding history pagination parameters.

    Hyperliquid caps the number of records returned per fundingHistory
    request (500 hourly samples), so wide ranges are split into chunks
    that stay below that cap.
    """

    model_config = SettingsConfigDict(env_prefix="HISTORY_")

    chunk_days: int = 20  # 480 hourly samples per request
    default_days: int = 30


class RankingSettings(BaseSettings):
    """Top performer ranking parameters."""

    model_config = SettingsConfigDict(env_prefix="RANKING_")

    min_oi_usd: Decimal = Decimal("1000000")  # $1M open interest
    top_n: int = 5
    candidate_limit: int = 30  # bounds upstream fan-out per ranking
    history_days: int = 30


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"  # env: LOG_FORMAT
    upstream: UpstreamSettings = UpstreamSettings()
    history: HistorySettings = HistorySettings()
    ranking: RankingSettings = RankingSettings()
