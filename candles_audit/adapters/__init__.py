"""Data adapters for candle history endpoints"""

from .base import AbstractHistoryProvider
from .history import HistoryProvider, build_history_url, get_provider

__all__ = [
    'AbstractHistoryProvider',
    'HistoryProvider',
    'build_history_url',
    'get_provider',
]
