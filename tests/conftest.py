"""Shared test fixtures for the funding rate viewer."""

import pytest

from funding_viewer.config import AppSettings, HistorySettings, RankingSettings, UpstreamSettings


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (local base URL, default ranking)."""
    return AppSettings(
        log_level="DEBUG",
        upstream=UpstreamSettings(base_url="http://localhost:9999"),
        history=HistorySettings(chunk_days=20, default_days=30),
        ranking=RankingSettings(),
    )
