"""Funding history layer -- chunked pagination and concurrent batch fetch."""

from funding_viewer.history.batch import BatchOrchestrator, BatchPolicy, history_window
from funding_viewer.history.fetcher import CHUNK_MS, HistoryFetcher

__all__ = ["CHUNK_MS", "BatchOrchestrator", "BatchPolicy", "HistoryFetcher", "history_window"]
