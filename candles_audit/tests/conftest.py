"""Shared test fixtures and utilities."""

from datetime import datetime
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytz

from candles_audit.adapters.base import AbstractHistoryProvider
from candles_audit.core.models import RawCandleResponse


def utc_ts(year, month, day, hour=0, minute=0, second=0) -> int:
    """UNIX seconds for a UTC wall-clock time"""
    return int(pytz.UTC.localize(datetime(year, month, day, hour, minute, second)).timestamp())


def make_raw(times: List[int], status: str = "ok") -> RawCandleResponse:
    """Raw response with one synthetic candle per timestamp"""
    return RawCandleResponse(
        s=status,
        time=list(times),
        open=[100.0 + i for i in range(len(times))],
        high=[101.0 + i for i in range(len(times))],
        low=[99.0 + i for i in range(len(times))],
        close=[100.5 + i for i in range(len(times))],
        volume=[10 * (i + 1) for i in range(len(times))],
    )


def mock_http_response(text: str, status: int = 200):
    """Create a mock aiohttp response + session.

    Returns (mock_session, mock_resp).
    """
    mock_resp = MagicMock()
    mock_resp.status = status
    mock_resp.text = AsyncMock(return_value=text)
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    mock_session.get = MagicMock(return_value=mock_resp)
    mock_session.closed = False
    return mock_session, mock_resp


class FakeHistoryProvider(AbstractHistoryProvider):
    """In-memory provider: returns canned responses keyed by window"""

    def __init__(
        self,
        responses: Optional[Dict] = None,
        default: Optional[RawCandleResponse] = None,
        error: Optional[Exception] = None
    ):
        super().__init__(name='fake')
        self.responses = responses or {}
        self.default = default
        self.error = error
        self.calls = []

    def build_url(self, resolution: int, from_ts: int, to_ts: int) -> str:
        return f"fake://history?resolution={resolution}&from={from_ts}&to={to_ts}"

    async def fetch_history(self, resolution: int, from_ts: int, to_ts: int) -> RawCandleResponse:
        self.validate_all(resolution, from_ts, to_ts)
        self.calls.append((resolution, from_ts, to_ts))
        if self.error is not None:
            raise self.error
        default = self.default if self.default is not None else make_raw([])
        return self.responses.get((from_ts, to_ts), default)


@pytest.fixture
def fake_provider():
    return FakeHistoryProvider()
