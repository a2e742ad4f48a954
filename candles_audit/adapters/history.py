"""
Провайдер для получения свечей через HTTP endpoint /history
"""

import asyncio
import json
from typing import Optional

import aiohttp
from pydantic import ValidationError

from .base import AbstractHistoryProvider
from ..core.config import DEFAULT_SYMBOL, DEFAULT_TIMEOUT, get_config
from ..core.exceptions import (
    ConfigurationException,
    DecodeException,
    TimeoutException,
    TransportException,
)
from ..core.models import RawCandleResponse


def build_history_url(
    base: Optional[str],
    symbol: str,
    resolution: int,
    from_ts: int,
    to_ts: int
) -> str:
    """
    Build the /history request URL

    ``base`` must already end with '/'; nothing is escaped.

    Example:
        build_history_url('https://api.example/', 'SOL/USDC', 60, 1715547600, 1715565600)
        -> 'https://api.example/history?symbol=SOL/USDC&resolution=60&from=1715547600&to=1715565600'
    """
    if not base:
        raise ConfigurationException("BASE_URL")

    return (
        f"{base}history?symbol={symbol}&resolution={int(resolution)}"
        f"&from={int(from_ts)}&to={int(to_ts)}"
    )


class HistoryProvider(AbstractHistoryProvider):
    """Провайдер данных через /history (aiohttp)"""

    def __init__(
        self,
        base_url: Optional[str],
        symbol: str = DEFAULT_SYMBOL,
        timeout: float = DEFAULT_TIMEOUT
    ):
        super().__init__(name='history', timeout=timeout)
        self.validate_symbol(symbol)
        self.base_url = base_url
        self.symbol = symbol
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def build_url(self, resolution: int, from_ts: int, to_ts: int) -> str:
        return build_history_url(self.base_url, self.symbol, resolution, from_ts, to_ts)

    async def fetch_history(
        self,
        resolution: int,
        from_ts: int,
        to_ts: int,
    ) -> RawCandleResponse:
        """
        GET /history for the window and decode the body

        Returns:
            RawCandleResponse: parsed columns (lengths are not checked here)

        Raises:
            ConfigurationException: base URL missing
            TransportException: connection error or non-200 status
            TimeoutException: request exceeded ``timeout``
            DecodeException: body is not JSON or has the wrong shape
        """
        self.validate_all(resolution, from_ts, to_ts)
        url = self.build_url(resolution, from_ts, to_ts)

        self.logger.debug(f"Request url: {url}")

        session = await self._get_session()

        try:
            async with session.get(url) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    raise TransportException(
                        url,
                        f"Unexpected HTTP status {resp.status}: {body[:200]}",
                        status=resp.status
                    )
                body = await resp.text()

        except asyncio.TimeoutError:
            raise TimeoutException(url, self.timeout)
        except aiohttp.ClientError as e:
            self.logger.error(f"Request failed for {url}: {e}")
            raise TransportException(url, str(e), original_error=e)

        return self._decode(body)

    def _decode(self, body: str) -> RawCandleResponse:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeException(f"Response is not valid JSON: {e}", original_error=e)

        if not isinstance(data, dict):
            raise DecodeException(f"Expected JSON object, got {type(data).__name__}")

        try:
            return RawCandleResponse(**data)
        except ValidationError as e:
            raise DecodeException(f"Response does not match candle schema: {e}", original_error=e)

    def __repr__(self) -> str:
        return (
            f"<HistoryProvider("
            f"symbol='{self.symbol}', "
            f"timeout={self.timeout}s"
            f")>"
        )


# Singleton instance
_provider_instance = None


def get_provider() -> HistoryProvider:
    """Get singleton instance of HistoryProvider"""
    global _provider_instance
    if _provider_instance is None:
        config = get_config()
        _provider_instance = HistoryProvider(
            base_url=config.base_url,
            symbol=config.symbol,
            timeout=config.timeout
        )
    return _provider_instance
